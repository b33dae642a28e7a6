"""Unit Tests for the Template service"""

import pytest
from pydantic import ValidationError

from jobtracker.api.errors import NotFoundError, PermissionDeniedError
from jobtracker.api.models.template_models import TemplateCreate, TemplateUpdate
from jobtracker.api.services.template_service import TemplateService, extract_variables, render
from tests.conftest import NOW

THANK_YOU = (
    "Dear {{hiringManager}},\n\n"
    "Thank you for the {{position}} interview at {{companyName}}.\n\n"
    "{{yourName}}\n{{yourPhone}}"
)


@pytest.fixture
def service(db):
    return TemplateService(db)


@pytest.fixture
def template(service, owner):
    return service.create_template(owner, TemplateCreate(
        name="  Thank you  ",
        type="thank-you",
        subject="Thanks, {{hiringManager}}",
        content=THANK_YOU,
    ))


class TestPlaceholders:
    def test_extract_in_order_without_duplicates(self):
        assert extract_variables("{{a}} {{b}} {{a}} {{ c }}") == ["a", "b"]

    def test_render_leaves_unknown(self):
        assert render("Hi {{name}}, {{other}}", {"name": "Sam"}) == "Hi Sam, {{other}}"
        assert render(None, {}) is None


class TestTemplateCrud:
    """Test create, update and ownership"""

    def test_create(self, template, owner):
        assert template.id.startswith("tpl_")
        assert template.name == "Thank you"
        assert template.variables == ["hiringManager", "position", "companyName", "yourName", "yourPhone"]
        assert template.usage_count == 0
        assert template.created_by == owner.user_id

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            TemplateCreate(name="   ", content="Hello")

    def test_update_recomputes_variables(self, service, owner, template):
        updated = service.update_template(
            owner, template.id, TemplateUpdate(name="Short", content="Hi {{yourName}}")
        )

        assert updated.name == "Short"
        assert updated.variables == ["yourName"]
        assert updated.type == template.type

    def test_update_requires_name_and_content(self):
        with pytest.raises(ValidationError):
            TemplateUpdate(content="Hi")

    def test_stranger_forbidden(self, service, stranger, template):
        with pytest.raises(PermissionDeniedError):
            service.get_template(stranger, template.id)

    def test_admin_allowed(self, service, admin, template):
        assert service.get_template(admin, template.id).id == template.id

    def test_missing(self, service, owner):
        with pytest.raises(NotFoundError, match="No template with id: tpl_missing"):
            service.delete_template(owner, "tpl_missing")

    def test_delete(self, service, owner, template, db):
        service.delete_template(owner, template.id)
        assert db.get_template(template.id) is None


class TestListing:
    def test_favorites_first_then_newest(self, service, owner, template):
        newer = service.create_template(owner, TemplateCreate(name="Follow up", type="follow-up", content="Hi"))
        assert [t.id for t in service.list_templates(owner)] == [newer.id, template.id]

        service.toggle_favorite(owner, template.id)
        assert [t.id for t in service.list_templates(owner)] == [template.id, newer.id]

    def test_filters(self, service, owner, template):
        service.create_template(owner, TemplateCreate(name="Follow up", type="follow-up", content="Hi"))

        assert len(service.list_templates(owner, template_type="follow-up")) == 1
        assert len(service.list_templates(owner, template_type="all")) == 2
        assert service.list_templates(owner, favorites_only=True) == []

    def test_toggle_favorite_twice(self, service, owner, template):
        assert service.toggle_favorite(owner, template.id).is_favorite is True
        assert service.toggle_favorite(owner, template.id).is_favorite is False


class TestPreviewUseDuplicate:
    def test_preview_defaults_from_profile(self, service, owner, template):
        result = service.preview(owner, template.id, now=NOW)

        assert result.template.preview_subject == "Thanks, Hiring Manager"
        assert "Thank you for the Software Engineer interview at ABC Company." in result.template.preview_content
        assert "Jane Doe\n+1 (555) 123-4567" in result.template.preview_content
        assert result.variables["date"] == "June 18, 2025"
        assert result.variables["currentDate"] == "6/18/2025"
        assert result.variables["yourEmail"] == "jane@example.com"

    def test_preview_supplied_values_win(self, service, owner, template, db):
        result = service.preview(owner, template.id, {"companyName": "Initech", "extra": "x"}, now=NOW)

        assert "at Initech." in result.template.preview_content
        assert result.variables["extra"] == "x"
        assert db.get_template(template.id)["content"] == THANK_YOU

    def test_use_counts(self, service, owner, template):
        assert service.record_use(owner, template.id) == 1
        assert service.record_use(owner, template.id) == 2

    def test_duplicate_belongs_to_caller(self, service, owner, admin, template):
        copy = service.duplicate(admin, template.id)

        assert copy.id != template.id
        assert copy.name == "Thank you (Copy)"
        assert copy.created_by == admin.user_id
        assert copy.content == template.content
        assert copy.variables == template.variables
        assert copy.usage_count == 0
        assert copy.is_favorite is False
