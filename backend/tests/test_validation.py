"""검증기 + 리소스 규칙 단위 테스트"""

import pytest

from app.core.errors import ValidationError
from app.core.validation import (
    ID_PATTERN,
    AlphaNumeric,
    IsArray,
    IsDate,
    IsNumber,
    IsUrl,
    MaxBytes,
    MaxLength,
    Regex,
    Required,
    check,
    one_of,
    validate,
)
from app.models.rules import PROJECT_CREATE_RULES, RECIPE_CREATE_RULES, USER_CREATE_RULES, USER_UPDATE_RULES


class TestConstraints:
    def test_required_rejects_missing_none_and_empty(self):
        assert check(Required(), None) is False
        assert check(Required(), "") is False
        assert check(Required(), "x") is True
        assert check(Required(), []) is True

    def test_optional_constraints_skip_absent_values(self):
        for c in (IsNumber(), IsArray(), MaxLength(1), Regex("^a$"), one_of("a"), IsDate(), IsUrl()):
            assert check(c, None) is True

    def test_number_excludes_bool_and_strings(self):
        assert check(IsNumber(), 12) is True
        assert check(IsNumber(), 1.5) is True
        assert check(IsNumber(), True) is False
        assert check(IsNumber(), "12") is False

    def test_max_length(self):
        assert check(MaxLength(3), "abc") is True
        assert check(MaxLength(3), "abcd") is False

    def test_max_bytes_counts_utf8(self):
        assert check(MaxBytes(4), "abcd") is True
        assert check(MaxBytes(4), "\u00e9\u00e9") is True
        assert check(MaxBytes(4), "\u00e9\u00e9a") is False

    def test_id_pattern_rejects_trailing_newline(self):
        assert check(Regex(ID_PATTERN), "a" * 24) is True
        assert check(Regex(ID_PATTERN), "a" * 24 + "\n") is False

    def test_alpha_numeric(self):
        assert check(AlphaNumeric(), "alice1") is True
        assert check(AlphaNumeric(), "alice_1") is False
        assert check(AlphaNumeric(), "alice1\n") is False

    def test_date_and_url(self):
        assert check(IsDate(), "2019-03-01") is True
        assert check(IsDate(), "2019-03-01T10:00:00Z") is True
        assert check(IsDate(), "yesterday") is False
        assert check(IsUrl(), "https://github.com/org/repo") is True
        assert check(IsUrl(), "github.com/org/repo") is False


class TestValidate:
    def test_returns_record_unchanged(self):
        record = {"name": "x", "extra": 1}
        assert validate(record, {"name": [Required()]}) is record

    def test_reports_first_violation(self):
        rules = {"a": [Required()], "b": [Required()]}
        with pytest.raises(ValidationError) as exc:
            validate({}, rules, "Invalid data.")
        assert exc.value.message == "Invalid data."
        assert exc.value.field == "a"
        assert exc.value.rule == "required"
        assert exc.value.error[0]["field"] == "a"

    def test_non_mapping_body(self):
        with pytest.raises(ValidationError):
            validate(["not", "a", "dict"], {"a": [Required()]})


class TestUserRules:
    @pytest.mark.parametrize("password", ["abcdef1!", "ABCDEF1!", "Abcdefg!", "Abcdefg1", "Ab1!"])
    def test_weak_passwords_rejected(self, user_payload, password):
        with pytest.raises(ValidationError) as exc:
            validate({**user_payload, "password": password}, USER_CREATE_RULES)
        assert exc.value.field == "password"

    def test_valid_user_passes(self, user_payload):
        validate(user_payload, USER_CREATE_RULES)

    def test_password_limit_is_in_bytes(self, user_payload):
        password = "Aa1!" + "\u00e9" * 68
        assert len(password) == 72
        with pytest.raises(ValidationError) as exc:
            validate({**user_payload, "password": password}, USER_CREATE_RULES)
        assert (exc.value.field, exc.value.rule) == ("password", "max_bytes")

    def test_username_too_long(self, user_payload):
        with pytest.raises(ValidationError) as exc:
            validate({**user_payload, "username": "a" * 16}, USER_CREATE_RULES)
        assert exc.value.field == "username"

    def test_enum_fields(self, user_payload):
        with pytest.raises(ValidationError) as exc:
            validate({**user_payload, "sex": "other"}, USER_CREATE_RULES)
        assert (exc.value.field, exc.value.rule) == ("sex", "in")

    def test_update_requires_hex_id(self, user_payload):
        with pytest.raises(ValidationError) as exc:
            validate({**user_payload, "id": "ABCDEF0123456789ABCDEF01"}, USER_UPDATE_RULES)
        assert exc.value.field == "id"


def test_recipe_rules_require_owner(recipe_payload):
    with pytest.raises(ValidationError) as exc:
        validate(recipe_payload, RECIPE_CREATE_RULES)
    assert exc.value.field == "userId"


def test_project_rules():
    with pytest.raises(ValidationError) as exc:
        validate({"name": "p", "description": "d"}, PROJECT_CREATE_RULES)
    assert exc.value.field == "authors"
