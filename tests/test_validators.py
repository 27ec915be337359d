"""
Unit tests for the validation pipeline.
"""
from league_api.utils.validators import (
    Check,
    ValidationContext,
    ValidationPipeline,
    email_format,
    matches_field,
    merge_errors,
    min_length,
    on_create,
    present,
    redirect_uris,
    scopes_within,
    when_present,
)


def test_pipeline_reports_in_check_order():
    pipeline = ValidationPipeline(
        [
            Check("email", present, "can't be blank"),
            Check("name", present, "can't be blank"),
            Check("email", email_format, "is invalid"),
        ]
    )

    errors = pipeline.run({"email": "", "name": "x"})

    assert errors == {"email": ["can't be blank", "is invalid"]}


def test_pipeline_empty_when_valid():
    pipeline = ValidationPipeline([Check("email", email_format, "is invalid")])

    assert pipeline.run({"email": "someone@example.com"}) == {}


def test_condition_skips_check():
    pipeline = ValidationPipeline(
        [
            Check("password", present, "can't be blank", on_create),
            Check("password", min_length(6), "is too short", when_present("password")),
        ]
    )

    assert pipeline.run({}, ValidationContext(new_record=False)) == {}
    assert pipeline.run({}, ValidationContext(new_record=True)) == {"password": ["can't be blank"]}
    assert pipeline.run({"password": "abc"}, ValidationContext(new_record=False)) == {
        "password": ["is too short"]
    }


def test_duplicate_messages_collapsed():
    pipeline = ValidationPipeline(
        [
            Check("email", present, "can't be blank"),
            Check("email", email_format, "can't be blank"),
        ]
    )

    assert pipeline.run({"email": None}) == {"email": ["can't be blank"]}


def test_matches_field():
    rule = matches_field("password")

    assert rule("secret", {"password": "secret"})
    assert not rule("other", {"password": "secret"})


def test_email_format():
    assert email_format("a@b.co", {})
    assert not email_format("not-an-email", {})
    assert not email_format("a b@c.de", {})
    assert not email_format(f"{'a' * 250}@b.com", {})


def test_redirect_uris():
    assert redirect_uris("https://example.com/cb", {})
    assert redirect_uris("urn:ietf:wg:oauth:2.0:oob", {})
    assert redirect_uris("https://a.example.com/cb https://b.example.com/cb", {})
    assert not redirect_uris("/relative/path", {})
    assert not redirect_uris("https://example.com/cb#fragment", {})
    assert not redirect_uris("   ", {})


def test_scopes_within():
    rule = scopes_within(lambda: ["read", "write"])

    assert rule("read write", {})
    assert rule("", {})
    assert not rule("read admin", {})


def test_merge_errors_keeps_order():
    merged = merge_errors({"email": ["is invalid"]}, {"email": ["has already been taken"], "team": ["must exist"]})

    assert merged == {"email": ["is invalid", "has already been taken"], "team": ["must exist"]}
