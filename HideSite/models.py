from django.db import models

from .gating.contracts import LOGIN_PAGE, GlobalMode, HideScope


class HideSiteOptions(models.Model):
    """
    Persisted hiding options. A single row (pk=1) is used; it is read fresh on
    every gated request.
    """

    SINGLETON_PK = 1

    HIDE_SCOPE_CHOICES = [
        (HideScope.GLOBAL.value, "Hide entire site"),
        (HideScope.BY_CONTENT.value, "Hide only specific content (by ID/slug)"),
    ]
    MODE_CHOICES = [
        (GlobalMode.OFF.value, "Disabled"),
        (GlobalMode.FULL.value, "Full hiding"),
        (GlobalMode.ROLES.value, "Hide for selected roles (others see the site)"),
    ]

    hide_scope = models.CharField(
        max_length=20,
        choices=HIDE_SCOPE_CHOICES,
        default=HideScope.GLOBAL.value,
    )
    mode = models.CharField(
        max_length=10,
        choices=MODE_CHOICES,
        default=GlobalMode.OFF.value,
        help_text="Global hiding mode, used when the whole site is hidden.",
    )
    redirect_page = models.PositiveIntegerField(
        default=LOGIN_PAGE,
        help_text="Page id to redirect to. 0 redirects to the login page.",
    )
    roles = models.TextField(
        blank=True,
        default="",
        help_text="Comma separated group names the site is hidden for in role mode.",
    )
    materials_mapping = models.TextField(
        "content to hide",
        blank=True,
        default="",
        help_text=(
            "One rule per line: identifier|role1,role2. The identifier is an ID (number) "
            "or a slug. Listed roles keep access; leave the roles empty to hide the content from everyone."
        ),
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "hide site options"
        verbose_name_plural = "hide site options"

    def __str__(self):
        return f"Hide site ({self.hide_scope}/{self.mode})"

    def save(self, *args, **kwargs):
        self.pk = self.SINGLETON_PK
        super().save(*args, **kwargs)

    def as_payload(self) -> dict:
        return {
            "hide_scope": self.hide_scope,
            "mode": self.mode,
            "redirect_page": self.redirect_page,
            "roles": self.roles,
            "materials_mapping": self.materials_mapping,
        }
