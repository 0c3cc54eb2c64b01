from django.core.management.base import BaseCommand, CommandError

from HideSite.gating.adapter import format_content_rules, to_config
from HideSite.gating.contracts import GlobalMode, HideScope
from HideSite.gating.exceptions import ConfigurationError
from HideSite.gating.store import load_options, save_options


class Command(BaseCommand):
    help = "Show or update the site hiding options."

    def add_arguments(self, parser):
        parser.add_argument("--scope", choices=[scope.value for scope in HideScope], help="Hiding scope.")
        parser.add_argument("--mode", choices=[mode.value for mode in GlobalMode], help="Global hiding mode.")
        parser.add_argument("--redirect-page", type=int, help="Page id to redirect to, 0 for the login page.")
        parser.add_argument("--roles", help="Comma separated roles the site is hidden for in role mode.")
        parser.add_argument(
            "--rule",
            action="append",
            dest="rules",
            help="Content rule 'identifier|role1,role2'. Repeat for several rules; replaces existing rules.",
        )
        parser.add_argument("--rules-file", help="File with one content rule per line; replaces existing rules.")
        parser.add_argument("--clear-rules", action="store_true", help="Remove every content rule.")

    def handle(self, *args, **options):
        mapping = None
        if options["clear_rules"]:
            mapping = ""
        elif options["rules_file"]:
            try:
                with open(options["rules_file"], encoding="utf-8") as handle:
                    mapping = handle.read()
            except OSError as exc:
                raise CommandError(f"Cannot read rules file: {exc}") from exc
        elif options["rules"]:
            mapping = "\n".join(options["rules"])

        fields = {
            "hide_scope": options["scope"],
            "mode": options["mode"],
            "redirect_page": options["redirect_page"],
            "roles": options["roles"],
            "materials_mapping": mapping,
        }
        if any(value is not None for value in fields.values()):
            try:
                save_options(**fields)
            except ConfigurationError as exc:
                raise CommandError(str(exc)) from exc
            self.stdout.write(self.style.SUCCESS("Hide-site options saved."))

        config = to_config(load_options())
        self.stdout.write(f"scope={config.hide_scope.value}")
        self.stdout.write(f"mode={config.global_mode.value}")
        self.stdout.write(f"redirect_page={config.redirect_page}")
        self.stdout.write(f"roles={','.join(sorted(config.global_roles))}")
        self.stdout.write("rules:")
        for line in format_content_rules(config.content_rules).splitlines():
            self.stdout.write(f"  {line}")
