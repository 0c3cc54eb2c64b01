from __future__ import annotations

from io import StringIO
from unittest import mock

from django.contrib import admin
from django.contrib.auth.models import Group, Permission, User
from django.core.exceptions import ObjectDoesNotExist
from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import OperationalError
from django.http import Http404, HttpResponse
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import include, path, reverse

from .forms import HideSiteOptionsForm
from .gating.adapter import (
    format_content_rules,
    parse_content_rules,
    sanitize_options,
    to_config,
)
from .gating.contracts import (
    LOGIN_PAGE,
    ContentKind,
    ContentRule,
    GlobalMode,
    HideScope,
    HideSiteConfig,
    RequestContext,
    ResolvedContent,
    Viewer,
)
from .gating.engine import decide
from .gating.exceptions import ConfigurationError
from .gating.identity import viewer_from_user
from .gating.store import load_config, save_options
from .gating.targets import resolve_redirect_url
from .models import HideSiteOptions


def _page(request, **kwargs):
    return HttpResponse("page")


def missing_page_url(page_id):
    return None


def deleted_page_url(page_id):
    raise ObjectDoesNotExist(f"Page {page_id} was deleted.")


def unpublished_page_url(page_id):
    raise Http404(f"No page {page_id}.")


def invalid_page_url(page_id):
    raise ValueError("bad page")


def broken_resolver(request, view_kwargs):
    raise RuntimeError("resolver exploded")


urlpatterns = [
    path("admin/", admin.site.urls),
    path("accounts/login/", _page, name="login"),
    path("pages/<int:pk>/", _page, name="page-detail"),
    path("posts/<slug:slug>/", _page, name="post-detail"),
    path("category/<int:pk>/", _page, name="category-detail"),
    path("api/items/", _page, name="api-items"),
    path("hide-site/", include("HideSite.urls")),
    path("", _page, name="home"),
]

GUEST = Viewer.anonymous()
MEMBER = Viewer(is_authenticated=True)
EDITOR = Viewer(is_authenticated=True, roles=frozenset({"editor"}))
SUBSCRIBER = Viewer(is_authenticated=True, roles=frozenset({"subscriber"}))
SITE_ADMIN = Viewer(is_authenticated=True, roles=frozenset({"editor"}), is_site_administrator=True)


def _global(mode: GlobalMode, **kwargs) -> HideSiteConfig:
    return HideSiteConfig(hide_scope=HideScope.GLOBAL, global_mode=mode, **kwargs)


def _by_content(*rules: ContentRule, **kwargs) -> HideSiteConfig:
    return HideSiteConfig(hide_scope=HideScope.BY_CONTENT, content_rules=rules, **kwargs)


def _content(content_id=None, slug="", kind=ContentKind.SINGULAR) -> RequestContext:
    return RequestContext(resolved_content=ResolvedContent(id=content_id, slug=slug, kind=kind))


class DecideBypassTests(SimpleTestCase):
    def test_admin_ajax_and_login_requests_are_always_allowed(self):
        configs = [
            _global(GlobalMode.FULL),
            _global(GlobalMode.ROLES, global_roles=frozenset({"editor"})),
            _by_content(ContentRule("42")),
        ]
        contexts = [
            RequestContext(is_admin_area=True, resolved_content=ResolvedContent(id=42)),
            RequestContext(is_ajax_or_rest=True, resolved_content=ResolvedContent(id=42)),
            RequestContext(is_login_page=True, resolved_content=ResolvedContent(id=42)),
        ]
        for config in configs:
            for ctx in contexts:
                for viewer in (GUEST, EDITOR):
                    self.assertTrue(decide(config, viewer, ctx).allowed)

    def test_redirect_page_itself_is_never_redirected(self):
        ctx = _content(7)
        for config in (
            _global(GlobalMode.FULL, redirect_page=7),
            _by_content(ContentRule("7"), redirect_page=7),
        ):
            decision = decide(config, GUEST, ctx)
            self.assertTrue(decision.allowed)
            self.assertEqual(decision.reason, "Request targets the redirect page.")

    def test_term_with_redirect_page_id_is_not_exempt(self):
        config = _by_content(ContentRule("7"), redirect_page=7)
        decision = decide(config, GUEST, _content(7, kind=ContentKind.TERM))
        self.assertFalse(decision.allowed)

    def test_login_sentinel_does_not_exempt_content_zero(self):
        config = _by_content(ContentRule("0"))
        self.assertFalse(decide(config, GUEST, _content(0)).allowed)


class DecideGlobalTests(SimpleTestCase):
    def test_off_allows_everyone(self):
        config = _global(GlobalMode.OFF)
        for viewer in (GUEST, MEMBER, EDITOR, SITE_ADMIN):
            self.assertTrue(decide(config, viewer, RequestContext()).allowed)

    def test_full_only_lets_site_administrators_in(self):
        config = _global(GlobalMode.FULL)
        self.assertFalse(decide(config, GUEST, RequestContext()).allowed)
        self.assertFalse(decide(config, EDITOR, RequestContext()).allowed)
        self.assertTrue(decide(config, SITE_ADMIN, RequestContext()).allowed)

    def test_full_redirect_targets_configured_page(self):
        decision = decide(_global(GlobalMode.FULL, redirect_page=12), GUEST, RequestContext())
        self.assertEqual(decision.target, 12)
        decision = decide(_global(GlobalMode.FULL), GUEST, RequestContext())
        self.assertEqual(decision.target, LOGIN_PAGE)

    def test_roles_mode(self):
        config = _global(GlobalMode.ROLES, global_roles=frozenset({"editor"}))
        self.assertFalse(decide(config, EDITOR, RequestContext()).allowed)
        self.assertTrue(decide(config, SUBSCRIBER, RequestContext()).allowed)
        self.assertFalse(decide(config, GUEST, RequestContext()).allowed)

    def test_roles_mode_does_not_exempt_site_administrators(self):
        config = _global(GlobalMode.ROLES, global_roles=frozenset({"editor"}))
        self.assertFalse(decide(config, SITE_ADMIN, RequestContext()).allowed)

    def test_decide_is_idempotent(self):
        config = _global(GlobalMode.ROLES, global_roles=frozenset({"editor"}))
        first = decide(config, EDITOR, RequestContext())
        second = decide(config, EDITOR, RequestContext())
        self.assertEqual(first, second)


class DecideByContentTests(SimpleTestCase):
    def test_rule_without_roles_hides_from_everyone(self):
        config = _by_content(ContentRule("42"))
        for viewer in (GUEST, MEMBER, EDITOR, SITE_ADMIN):
            self.assertFalse(decide(config, viewer, _content(42, "hello")).allowed)

    def test_slug_rule_keeps_access_for_exempt_roles(self):
        config = _by_content(ContentRule("about-us", frozenset({"editor"})))
        ctx = _content(3, "about-us")
        self.assertTrue(decide(config, EDITOR, ctx).allowed)
        self.assertFalse(decide(config, SUBSCRIBER, ctx).allowed)
        self.assertFalse(decide(config, GUEST, ctx).allowed)

    def test_numeric_identifier_only_matches_id(self):
        config = _by_content(ContentRule("42"))
        self.assertTrue(decide(config, GUEST, _content(7, "42")).allowed)
        self.assertFalse(decide(config, GUEST, _content(42, "anything")).allowed)

    def test_slug_match_is_exact(self):
        config = _by_content(ContentRule("about-us"))
        self.assertTrue(decide(config, GUEST, _content(1, "About-Us")).allowed)
        self.assertTrue(decide(config, GUEST, _content(1, "about-us-2")).allowed)

    def test_no_content_or_no_match_allows(self):
        config = _by_content(ContentRule("42"))
        self.assertTrue(decide(config, GUEST, RequestContext()).allowed)
        self.assertTrue(decide(config, GUEST, _content(43, "other")).allowed)

    def test_overlapping_rules_any_hiding_match_wins(self):
        config = _by_content(
            ContentRule("about-us", frozenset({"editor"})),
            ContentRule("5"),
        )
        self.assertFalse(decide(config, EDITOR, _content(5, "about-us")).allowed)

    def test_global_mode_is_ignored_in_content_scope(self):
        config = HideSiteConfig(hide_scope=HideScope.BY_CONTENT, global_mode=GlobalMode.FULL)
        self.assertTrue(decide(config, GUEST, _content(1, "x")).allowed)


class AdapterTests(SimpleTestCase):
    def test_malformed_payload_degrades_to_default(self):
        self.assertEqual(to_config(None), HideSiteConfig.default())
        config = to_config({"hide_scope": "everything", "mode": "loud", "redirect_page": "abc", "roles": 5})
        self.assertEqual(config, HideSiteConfig.default())
        self.assertEqual(to_config({"redirect_page": -3}).redirect_page, LOGIN_PAGE)

    def test_payload_fields(self):
        config = to_config(
            {
                "hide_scope": "by_material",
                "mode": "roles",
                "redirect_page": "12",
                "roles": "editor, author,,editor",
                "materials_mapping": "42|editor\nabout-us|",
            }
        )
        self.assertIs(config.hide_scope, HideScope.BY_CONTENT)
        self.assertIs(config.global_mode, GlobalMode.ROLES)
        self.assertEqual(config.redirect_page, 12)
        self.assertEqual(config.global_roles, frozenset({"editor", "author"}))
        self.assertEqual(
            config.content_rules,
            (ContentRule("42", frozenset({"editor"})), ContentRule("about-us")),
        )

    def test_structured_mapping(self):
        config = to_config(
            {"materials_mapping": [{"identifier": " 42 ", "groups": ["editor", " "]}, {"identifier": ""}]}
        )
        self.assertEqual(config.content_rules, (ContentRule("42", frozenset({"editor"})),))

    def test_parse_rule_lines(self):
        rules = parse_content_rules("  42 | editor , subscriber \n\n|orphan\nabout-us\nnews|a|b")
        self.assertEqual(
            rules,
            (
                ContentRule("42", frozenset({"editor", "subscriber"})),
                ContentRule("about-us"),
                ContentRule("news", frozenset({"a"})),
            ),
        )

    def test_strict_parse_reports_line(self):
        with self.assertRaisesMessage(ConfigurationError, "Line 2"):
            parse_content_rules("42|\n|editor", strict=True)

    def test_numeric_identifiers(self):
        self.assertTrue(ContentRule("42").is_numeric)
        self.assertTrue(ContentRule("-1").is_numeric)
        self.assertFalse(ContentRule("4_2").is_numeric)
        self.assertFalse(ContentRule("42a").is_numeric)

    def test_format_rules(self):
        rules = (ContentRule("42", frozenset({"subscriber", "editor"})), ContentRule("about-us"))
        self.assertEqual(format_content_rules(rules), "42|editor,subscriber\nabout-us|")

    def test_sanitize_options(self):
        cleaned = sanitize_options(
            {
                "hide_scope": "nope",
                "mode": "full",
                "redirect_page": None,
                "roles": ["editor", "editor", " author "],
                "materials_mapping": ["42|editor", "", "about-us|"],
            }
        )
        self.assertEqual(
            cleaned,
            {
                "hide_scope": "global",
                "mode": "full",
                "redirect_page": 0,
                "roles": "editor,author",
                "materials_mapping": "42|editor\nabout-us|",
            },
        )


@override_settings(
    ROOT_URLCONF="HideSite.tests",
    LOGIN_URL="/accounts/login/",
    HIDE_SITE_HOME_URL="/",
    HIDE_SITE_LOGIN_NEXT=False,
    HIDE_SITE_PAGE_URL_NAME="page-detail",
    HIDE_SITE_PAGE_URL_RESOLVER="",
)
class RedirectTargetTests(SimpleTestCase):
    def test_login_sentinel(self):
        self.assertEqual(resolve_redirect_url(LOGIN_PAGE, next_path="/pages/3/"), "/accounts/login/")

    @override_settings(HIDE_SITE_LOGIN_NEXT=True)
    def test_login_with_next(self):
        self.assertEqual(
            resolve_redirect_url(LOGIN_PAGE, next_path="/pages/3/"),
            "/accounts/login/?next=/pages/3/",
        )

    def test_page_permalink(self):
        self.assertEqual(resolve_redirect_url(7), "/pages/7/")

    @override_settings(HIDE_SITE_PAGE_URL_NAME="no-such-route")
    def test_unknown_route_falls_back_to_home(self):
        with self.assertLogs("HideSite.gating.targets", "WARNING"):
            self.assertEqual(resolve_redirect_url(7), "/")

    @override_settings(HIDE_SITE_PAGE_URL_NAME="")
    def test_unconfigured_resolver_falls_back_to_home(self):
        with self.assertLogs("HideSite.gating.targets", "WARNING"):
            self.assertEqual(resolve_redirect_url(7), "/")

    @override_settings(HIDE_SITE_PAGE_URL_RESOLVER="HideSite.tests.missing_page_url", HIDE_SITE_HOME_URL="/home/")
    def test_page_that_no_longer_resolves_falls_back_to_home(self):
        with self.assertLogs("HideSite.gating.targets", "WARNING"):
            self.assertEqual(resolve_redirect_url(7), "/home/")

    @override_settings(HIDE_SITE_PAGE_URL_RESOLVER="HideSite.tests.deleted_page_url")
    def test_deleted_page_falls_back_to_home(self):
        with self.assertLogs("HideSite.gating.targets", "WARNING"):
            self.assertEqual(resolve_redirect_url(7), "/")

    @override_settings(HIDE_SITE_PAGE_URL_RESOLVER="HideSite.tests.does_not_exist")
    def test_unimportable_resolver_falls_back_to_home(self):
        with self.assertLogs("HideSite.gating.targets", "WARNING"):
            self.assertEqual(resolve_redirect_url(7), "/")

    @override_settings(HIDE_SITE_PAGE_URL_RESOLVER="HideSite.tests.unpublished_page_url")
    def test_resolver_raising_http404_falls_back_to_home(self):
        with self.assertLogs("HideSite.gating.targets", "ERROR"):
            self.assertEqual(resolve_redirect_url(7), "/")

    @override_settings(HIDE_SITE_PAGE_URL_RESOLVER="HideSite.tests.invalid_page_url")
    def test_resolver_raising_value_error_falls_back_to_home(self):
        with self.assertLogs("HideSite.gating.targets", "ERROR"):
            self.assertEqual(resolve_redirect_url(7), "/")


class StoreTests(TestCase):
    @override_settings(HIDE_SITE_OPTIONS={"mode": "full", "redirect_page": 4})
    def test_settings_fallback_without_row(self):
        config = load_config()
        self.assertIs(config.global_mode, GlobalMode.FULL)
        self.assertEqual(config.redirect_page, 4)

    def test_row_wins_over_settings(self):
        HideSiteOptions.objects.create(hide_scope="by_material", materials_mapping="42|")
        with self.settings(HIDE_SITE_OPTIONS={"mode": "full"}):
            config = load_config()
        self.assertIs(config.hide_scope, HideScope.BY_CONTENT)
        self.assertIs(config.global_mode, GlobalMode.OFF)
        self.assertEqual(config.content_rules, (ContentRule("42"),))

    @override_settings(HIDE_SITE_OPTIONS={"mode": "roles", "roles": ["editor"]})
    def test_database_error_falls_back_to_settings(self):
        with mock.patch("HideSite.models.HideSiteOptions.objects") as objects:
            objects.filter.side_effect = OperationalError("no such table")
            with self.assertLogs("HideSite.gating.store", "WARNING"):
                config = load_config()
        self.assertIs(config.global_mode, GlobalMode.ROLES)
        self.assertEqual(config.global_roles, frozenset({"editor"}))

    def test_save_options_merges_and_keeps_singleton(self):
        save_options(hide_scope="global", mode="full")
        save_options(redirect_page=9)
        self.assertEqual(HideSiteOptions.objects.count(), 1)
        row = HideSiteOptions.objects.get()
        self.assertEqual(row.pk, HideSiteOptions.SINGLETON_PK)
        self.assertEqual((row.mode, row.redirect_page), ("full", 9))

    def test_save_options_rejects_rules_without_identifier(self):
        with self.assertRaises(ConfigurationError):
            save_options(materials_mapping="|editor")
        self.assertFalse(HideSiteOptions.objects.exists())


class IdentityTests(TestCase):
    def test_anonymous(self):
        self.assertEqual(viewer_from_user(None, admin_permission=""), Viewer.anonymous())

    def test_roles_come_from_groups(self):
        user = User.objects.create_user("ed")
        user.groups.add(Group.objects.create(name="editor"))
        viewer = viewer_from_user(user, admin_permission="HideSite.change_hidesiteoptions")
        self.assertTrue(viewer.is_authenticated)
        self.assertEqual(viewer.roles, frozenset({"editor"}))
        self.assertFalse(viewer.is_site_administrator)

    def test_site_administrator_by_permission_or_superuser(self):
        manager = User.objects.create_user("manager")
        manager.user_permissions.add(Permission.objects.get(codename="change_hidesiteoptions"))
        root = User.objects.create_superuser("root", "root@example.com", "pw")
        for user in (manager, root):
            viewer = viewer_from_user(user, admin_permission="HideSite.change_hidesiteoptions")
            self.assertTrue(viewer.is_site_administrator)


@override_settings(
    ROOT_URLCONF="HideSite.tests",
    LOGIN_URL="/accounts/login/",
    HIDE_SITE_ADMIN_PREFIXES=("/admin/",),
    HIDE_SITE_API_PREFIXES=("/api/",),
    HIDE_SITE_LOGIN_NEXT=False,
    HIDE_SITE_HOME_URL="/",
    HIDE_SITE_PAGE_URL_NAME="page-detail",
    HIDE_SITE_PAGE_URL_RESOLVER="",
    HIDE_SITE_CONTENT_RESOLVER="",
    HIDE_SITE_TERM_URL_NAMES=("category-detail",),
    HIDE_SITE_OPTIONS={},
)
class HideSiteMiddlewareTests(TestCase):
    def setUp(self):
        self.editor = User.objects.create_user("editor_user", password="pw")
        self.editor.groups.add(Group.objects.create(name="editor"))
        self.subscriber = User.objects.create_user("subscriber_user", password="pw")
        self.subscriber.groups.add(Group.objects.create(name="subscriber"))
        self.root = User.objects.create_superuser("root", "root@example.com", "pw")

    def _options(self, **fields):
        return HideSiteOptions.objects.create(**fields)

    def test_nothing_hidden_by_default(self):
        response = self.client.get("/pages/5/")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.wsgi_request.hide_site_decision.allowed)

    def test_full_mode_redirects_guests_to_login(self):
        self._options(mode="full")
        response = self.client.get("/pages/5/")
        self.assertRedirects(response, "/accounts/login/", fetch_redirect_response=False)

    @override_settings(HIDE_SITE_LOGIN_NEXT=True)
    def test_login_redirect_carries_next(self):
        self._options(mode="full")
        response = self.client.get("/posts/hello/?page=2")
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response["Location"], "/accounts/login/?next=/posts/hello/%3Fpage%3D2")

    def test_full_mode_lets_superuser_through(self):
        self._options(mode="full")
        self.client.force_login(self.editor)
        self.assertEqual(self.client.get("/").status_code, 302)
        self.client.force_login(self.root)
        self.assertEqual(self.client.get("/").status_code, 200)

    def test_full_mode_redirects_to_configured_page_and_spares_it(self):
        self._options(mode="full", redirect_page=7)
        response = self.client.get("/pages/8/")
        self.assertRedirects(response, "/pages/7/", fetch_redirect_response=False)
        self.assertEqual(self.client.get("/pages/7/").status_code, 200)

    @override_settings(HIDE_SITE_PAGE_URL_RESOLVER="HideSite.tests.missing_page_url")
    def test_deleted_redirect_page_sends_to_home(self):
        self._options(mode="full", redirect_page=7)
        with self.assertLogs("HideSite.gating.targets", "WARNING"):
            response = self.client.get("/pages/8/")
        self.assertRedirects(response, "/", fetch_redirect_response=False)

    def test_bypassed_requests(self):
        self._options(mode="full")
        self.assertEqual(self.client.get("/accounts/login/").status_code, 200)
        self.assertEqual(self.client.get("/api/items/").status_code, 200)
        response = self.client.get("/pages/5/", HTTP_X_REQUESTED_WITH="XMLHttpRequest")
        self.assertEqual(response.status_code, 200)
        # The admin handles its own login redirect.
        response = self.client.get("/admin/")
        self.assertTrue(response.wsgi_request.hide_site_decision.allowed)
        self.assertTrue(response["Location"].startswith("/admin/login/"))

    def test_roles_mode(self):
        self._options(mode="roles", roles="editor")
        self.client.force_login(self.editor)
        self.assertEqual(self.client.get("/").status_code, 302)
        self.client.force_login(self.subscriber)
        self.assertEqual(self.client.get("/").status_code, 200)

    def test_content_rules(self):
        self._options(hide_scope="by_material", materials_mapping="42|\nabout-us|editor")
        self.assertEqual(self.client.get("/pages/42/").status_code, 302)
        self.assertEqual(self.client.get("/pages/41/").status_code, 200)
        self.assertEqual(self.client.get("/").status_code, 200)
        self.assertEqual(self.client.get("/posts/about-us/").status_code, 302)

        self.client.force_login(self.editor)
        self.assertEqual(self.client.get("/pages/42/").status_code, 302)
        self.assertEqual(self.client.get("/posts/about-us/").status_code, 200)

        self.client.force_login(self.subscriber)
        self.assertEqual(self.client.get("/posts/about-us/").status_code, 302)

    def test_term_content_is_matched_by_id(self):
        self._options(hide_scope="by_material", materials_mapping="3|", redirect_page=3)
        # A term sharing the redirect page id is still hidden.
        response = self.client.get("/category/3/")
        self.assertRedirects(response, "/pages/3/", fetch_redirect_response=False)
        self.assertEqual(self.client.get("/pages/3/").status_code, 200)

    @override_settings(HIDE_SITE_CONTENT_RESOLVER="HideSite.tests.broken_resolver")
    def test_failing_content_resolver_allows(self):
        self._options(hide_scope="by_material", materials_mapping="42|")
        with self.assertLogs("HideSite.gating.content", "ERROR"):
            response = self.client.get("/pages/42/")
        self.assertEqual(response.status_code, 200)

    def test_malformed_stored_options_do_not_break_pages(self):
        HideSiteOptions.objects.create(hide_scope="bogus", mode="bogus")
        self.assertEqual(self.client.get("/pages/5/").status_code, 200)

    def test_unmatched_path_is_gated(self):
        self.assertEqual(self.client.get("/secret-does-not-exist/").status_code, 404)
        self._options(mode="full")
        response = self.client.get("/secret-does-not-exist/")
        self.assertRedirects(response, "/accounts/login/", fetch_redirect_response=False)
        self.assertFalse(response.wsgi_request.hide_site_decision.allowed)

    def test_unmatched_path_is_not_gated_by_content_rules(self):
        self._options(hide_scope="by_material", materials_mapping="42|")
        self.assertEqual(self.client.get("/secret-does-not-exist/").status_code, 404)

    @override_settings(HIDE_SITE_PAGE_URL_RESOLVER="HideSite.tests.invalid_page_url")
    def test_failing_page_resolver_sends_to_home(self):
        self._options(mode="full", redirect_page=7)
        with self.assertLogs("HideSite.gating.targets", "ERROR"):
            response = self.client.get("/pages/3/")
        self.assertRedirects(response, "/", fetch_redirect_response=False)

    @override_settings(HIDE_SITE_PAGE_URL_RESOLVER="HideSite.tests.missing_page_url")
    def test_home_fallback_target_is_reachable(self):
        self._options(mode="full", redirect_page=7)
        with self.assertLogs("HideSite.gating.targets", "WARNING"):
            response = self.client.get("/pages/3/")
        self.assertRedirects(response, "/", fetch_redirect_response=False)
        with self.assertLogs("HideSite.gating.targets", "WARNING"):
            response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.wsgi_request.hide_site_decision.allowed)

    def test_prefixes_ignore_script_name(self):
        self._options(mode="full")
        response = self.client.get("/api/items/", SCRIPT_NAME="/site")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.wsgi_request.hide_site_decision.allowed)


class HideSiteOptionsFormTests(TestCase):
    def _data(self, **overrides):
        data = {
            "hide_scope": "by_material",
            "mode": "off",
            "redirect_page": 0,
            "roles": " editor, ,author ",
            "materials_mapping": "42 | editor, subscriber\n\nabout-us|",
        }
        data.update(overrides)
        return data

    def test_valid_form_is_normalized(self):
        form = HideSiteOptionsForm(data=self._data())
        self.assertTrue(form.is_valid(), form.errors)
        row = form.save()
        self.assertEqual(row.roles, "editor,author")
        self.assertEqual(row.materials_mapping, "42|editor,subscriber\nabout-us|")

    def test_missing_identifier_is_rejected(self):
        form = HideSiteOptionsForm(data=self._data(materials_mapping="42|\n|editor"))
        self.assertFalse(form.is_valid())
        self.assertIn("Line 2", form.errors["materials_mapping"][0])

    def test_unknown_mode_is_rejected(self):
        form = HideSiteOptionsForm(data=self._data(mode="loud"))
        self.assertFalse(form.is_valid())
        self.assertIn("mode", form.errors)


class ManagementCommandTests(TestCase):
    def test_options_command_saves_and_prints(self):
        out = StringIO()
        call_command(
            "hide_site_options",
            "--scope", "by_material",
            "--rule", "42|",
            "--rule", "about-us|editor",
            stdout=out,
        )
        row = HideSiteOptions.objects.get()
        self.assertEqual(row.hide_scope, "by_material")
        self.assertEqual(row.materials_mapping, "42|\nabout-us|editor")
        self.assertIn("Hide-site options saved.", out.getvalue())
        self.assertIn("  about-us|editor", out.getvalue())

    def test_options_command_show_only(self):
        out = StringIO()
        call_command("hide_site_options", stdout=out)
        self.assertIn("scope=global", out.getvalue())
        self.assertIn("mode=off", out.getvalue())
        self.assertFalse(HideSiteOptions.objects.exists())

    def test_options_command_rejects_bad_rule(self):
        with self.assertRaises(CommandError):
            call_command("hide_site_options", "--rule", "|editor", stdout=StringIO())

    @override_settings(LOGIN_URL="/accounts/login/")
    def test_check_command(self):
        HideSiteOptions.objects.create(hide_scope="by_material", materials_mapping="about-us|editor")
        editor = User.objects.create_user("ed")
        editor.groups.add(Group.objects.create(name="editor"))

        out = StringIO()
        call_command("hide_site_check", "--slug", "about-us", stdout=out)
        self.assertIn("REDIRECT to /accounts/login/", out.getvalue())

        out = StringIO()
        call_command("hide_site_check", "--slug", "about-us", "--username", "ed", stdout=out)
        self.assertIn("ALLOW", out.getvalue())

    def test_check_command_unknown_user(self):
        with self.assertRaises(CommandError):
            call_command("hide_site_check", "--username", "ghost", stdout=StringIO())


@override_settings(ROOT_URLCONF="HideSite.tests", LOGIN_URL="/accounts/login/", HIDE_SITE_OPTIONS={})
class StatusViewTests(TestCase):
    def test_staff_sees_status(self):
        HideSiteOptions.objects.create(mode="roles", roles="editor,author", materials_mapping="42|")
        staff = User.objects.create_user("staff", is_staff=True)
        self.client.force_login(staff)
        response = self.client.get(reverse("HideSite:status"))
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["mode"], "roles")
        self.assertEqual(data["global_roles"], ["author", "editor"])
        self.assertEqual(data["redirect_url"], "/accounts/login/")
        self.assertEqual(data["content_rules"], ["42|"])
        self.assertEqual(data["content_rules_count"], 1)

    def test_non_staff_is_sent_to_admin_login(self):
        self.client.force_login(User.objects.create_user("plain"))
        response = self.client.get(reverse("HideSite:status"))
        self.assertEqual(response.status_code, 302)
        self.assertIn("/admin/login/", response["Location"])
