from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError

from HideSite.gating.contracts import ContentKind, RequestContext, ResolvedContent
from HideSite.gating.engine import decide
from HideSite.gating.identity import viewer_from_user
from HideSite.gating.settings import get_hide_site_settings
from HideSite.gating.store import load_config
from HideSite.gating.targets import resolve_redirect_url


class Command(BaseCommand):
    help = "Evaluate the hiding rules for a user and content item."

    def add_arguments(self, parser):
        parser.add_argument("--username", help="Evaluate as this user. Anonymous when omitted.")
        parser.add_argument("--content-id", type=int, help="Numeric id of the requested content.")
        parser.add_argument("--slug", default="", help="Slug of the requested content.")
        parser.add_argument("--term", action="store_true", help="The content is a taxonomy term.")

    def handle(self, *args, **options):
        user = None
        if options["username"]:
            User = get_user_model()
            try:
                user = User.objects.get(**{User.USERNAME_FIELD: options["username"]})
            except User.DoesNotExist as exc:
                raise CommandError(f"User '{options['username']}' does not exist.") from exc

        content = None
        if options["content_id"] is not None or options["slug"]:
            content = ResolvedContent(
                id=options["content_id"],
                slug=options["slug"],
                kind=ContentKind.TERM if options["term"] else ContentKind.SINGULAR,
            )

        viewer = viewer_from_user(user, admin_permission=get_hide_site_settings().admin_permission)
        decision = decide(load_config(), viewer, RequestContext(resolved_content=content))
        if decision.allowed:
            self.stdout.write(self.style.SUCCESS(f"ALLOW: {decision.reason}"))
            return
        self.stdout.write(
            self.style.WARNING(
                f"REDIRECT to {resolve_redirect_url(decision.target)}: {decision.reason}"
            )
        )
