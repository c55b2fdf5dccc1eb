import pytest

from relata import DataSourceNotFoundError, RelataError
from relata.errors import INTERNAL, ErrorCategory, ErrorCode, ErrorSeverity, registry
from relata.relations import MixedEntityBatchError, RelationDeclarationError
from relata.relations.errors import RELATION, RELATION_DECLARATION_ERROR


class FakeError(RelataError):
    def __init__(self, message, **kwargs):
        super().__init__(
            message,
            code=ErrorCode.get_or_create("FAKE_ERROR", ErrorCategory.get_or_create("TESTING")),
            **kwargs,
        )


def test_relata_error_cannot_be_instantiated():
    with pytest.raises(TypeError):
        RelataError("msg", code=RELATION_DECLARATION_ERROR)


def test_code_must_be_error_code():
    class StringCodeError(RelataError):
        pass

    with pytest.raises(TypeError):
        StringCodeError("msg", code="FAKE_ERROR")


def test_subclass_carries_code_category_and_context():
    err = FakeError("something went wrong", context={"a": 1}, b=2)

    assert str(err) == "FAKE_ERROR: something went wrong"
    assert err.category.name == "TESTING"
    assert err.severity is ErrorSeverity.ERROR
    assert err.context == {"a": 1, "b": 2}


def test_add_context_chains():
    err = FakeError("boom").add_context("table", "tb_role")

    assert err.context["table"] == "tb_role"


def test_to_dict():
    err = RelationDeclarationError(
        "Account.dept: self_field is required", entity_type=int, field_name="dept"
    )

    data = err.to_dict()

    assert data["code"] == "RELATION_DECLARATION_ERROR"
    assert data["category"] == "RELATION"
    assert data["severity"] == "ERROR"
    assert data["context"] == {"entity_type": "int", "field_name": "dept"}
    assert "timestamp" in data


def test_codes_are_registered_once():
    assert ErrorCode.get_or_create("RELATION_DECLARATION_ERROR", RELATION) is RELATION_DECLARATION_ERROR
    assert ErrorCategory.get_or_create("RELATION") is RELATION
    assert registry.get_code("DATASOURCE_NOT_FOUND").category.name == "DATASOURCE"


def test_code_without_category_is_internal():
    assert ErrorCode("TESTING_LOOSE").category is INTERNAL


def test_mixed_batch_message():
    err = MixedEntityBatchError(int, str)

    assert err.message == "Entity batch mixes int and str"
    assert err.context == {"expected_type": "int", "found_type": "str"}


def test_datasource_not_found():
    err = DataSourceNotFoundError("archive", available=["main"])

    assert str(err) == "DATASOURCE_NOT_FOUND: No datasource configured for key 'archive'"
    assert err.context == {"datasource": "archive", "available": ["main"]}
