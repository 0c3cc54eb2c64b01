from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="HideSiteOptions",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "hide_scope",
                    models.CharField(
                        choices=[
                            ("global", "Hide entire site"),
                            ("by_material", "Hide only specific content (by ID/slug)"),
                        ],
                        default="global",
                        max_length=20,
                    ),
                ),
                (
                    "mode",
                    models.CharField(
                        choices=[
                            ("off", "Disabled"),
                            ("full", "Full hiding"),
                            ("roles", "Hide for selected roles (others see the site)"),
                        ],
                        default="off",
                        help_text="Global hiding mode, used when the whole site is hidden.",
                        max_length=10,
                    ),
                ),
                (
                    "redirect_page",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Page id to redirect to. 0 redirects to the login page.",
                    ),
                ),
                (
                    "roles",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text="Comma separated group names the site is hidden for in role mode.",
                    ),
                ),
                (
                    "materials_mapping",
                    models.TextField(
                        blank=True,
                        default="",
                        help_text=(
                            "One rule per line: identifier|role1,role2. The identifier is an ID (number) "
                            "or a slug. Listed roles keep access; leave the roles empty to hide the content from everyone."
                        ),
                        verbose_name="content to hide",
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "hide site options",
                "verbose_name_plural": "hide site options",
            },
        ),
    ]
