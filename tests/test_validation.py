import pytest

from utils.validation import (
    ValidationFailedError,
    ensure_valid,
    sanitize_text,
    validate_graduation_year,
    validate_interest,
    validate_linkedin_url,
    validate_profile_info,
    validate_project,
    validate_skill,
)


@pytest.mark.parametrize("url", [
    None,
    "",
    "https://linkedin.com/in/ada-lovelace",
    "https://www.linkedin.com/in/ada/",
])
def test_linkedin_url_accepted(url):
    assert validate_linkedin_url(url).is_valid


@pytest.mark.parametrize("url", [
    "https://linkedin.com/company/acme",
    "linkedin.com/in/ada",
    "https://example.com/in/ada",
])
def test_linkedin_url_rejected(url):
    result = validate_linkedin_url(url)
    assert not result.is_valid
    assert result.errors == ["Please enter a valid LinkedIn profile URL"]


def test_skill_and_interest_length_limits():
    assert validate_skill("Go").is_valid
    assert validate_skill(" ").errors == ["Skill name is required"]
    assert validate_skill("x").errors == ["Skill name must be at least 2 characters"]
    assert validate_interest("y" * 51).errors == ["Interest name must be less than 50 characters"]


def test_graduation_year_range():
    assert validate_graduation_year(None).is_valid
    assert validate_graduation_year(1900).is_valid
    assert not validate_graduation_year(1899).is_valid
    assert not validate_graduation_year(3000).is_valid


def test_profile_info_collects_every_error():
    result = validate_profile_info(name="n" * 101, location="l" * 101, cohort="c" * 51, year=1066)

    assert result.errors[:3] == [
        "Name must be less than 100 characters",
        "Location must be less than 100 characters",
        "Cohort must be less than 50 characters",
    ]
    assert result.errors[3].startswith("Year must be between 1900 and ")


def test_profile_info_name_optional_for_partial_updates():
    assert validate_profile_info(require_name=False, cohort="Cohort 5").is_valid
    assert validate_profile_info(require_name=True).errors == ["Name is required"]


def test_project_limits():
    assert validate_project("Engine").is_valid
    assert validate_project(None, require_title=False).is_valid
    assert validate_project("t" * 101).errors == ["Project title must be less than 100 characters"]
    assert validate_project("Engine", description="d" * 1001).errors == [
        "Project description must be less than 1000 characters"
    ]


def test_ensure_valid_raises_with_all_messages():
    with pytest.raises(ValidationFailedError) as exc:
        ensure_valid(validate_skill("x"), validate_interest(""))

    assert exc.value.errors == ["Skill name must be at least 2 characters", "Interest name is required"]


def test_sanitize_text():
    assert sanitize_text("  <script>hi</script> ") == "scripthi/script"
