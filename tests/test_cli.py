from app.utils.jwt import decode_token


def test_pricing_selfcheck_passes(app):
    result = app.test_cli_runner().invoke(args=["pricing-selfcheck"])
    assert result.exit_code == 0
    assert "scenarios passed" in result.output


def test_pricing_selfcheck_verbose_lists_scenarios(app):
    result = app.test_cli_runner().invoke(args=["pricing-selfcheck", "--verbose"])
    assert "SD-01 [Pass]" in result.output


def test_issue_token(app):
    result = app.test_cli_runner().invoke(args=["issue-token", "ops@example.com", "--role", "qa"])
    assert result.exit_code == 0
    payload = decode_token(result.output.strip())
    assert payload["sub"] == "ops@example.com"
    assert payload["role"] == "qa"
