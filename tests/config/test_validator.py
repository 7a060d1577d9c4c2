from praxistax.backend.config.validator import (
    main,
    validate_all_years,
    validate_year_configuration,
)
from praxistax.backend.config.year_config import load_year_configuration


def test_current_configurations_are_valid() -> None:
    results = validate_all_years()
    assert set(results) == {2023, 2024, 2025}
    assert all(not issues for issues in results.values()), results


def test_validator_flags_component_rates_that_do_not_add_up() -> None:
    config = load_year_configuration(2024)
    social_security = config.comprehensive.social_security
    employee = social_security.employee.model_copy(
        update={
            "components": social_security.employee.components.model_copy(
                update={"pension": 0.2}
            )
        }
    )
    comprehensive = config.comprehensive.model_copy(
        update={"social_security": social_security.model_copy(update={"employee": employee})}
    )
    broken = config.model_copy(update={"comprehensive": comprehensive})

    errors = validate_year_configuration(broken)

    assert any(
        "comprehensive.social_security.employee" in error and "component rates" in error
        for error in errors
    )


def test_validator_flags_decreasing_bracket_rates() -> None:
    config = load_year_configuration(2024)
    brackets = list(config.income_tax.brackets)
    brackets[3] = brackets[3].model_copy(update={"rate": 0.1})
    income_tax = config.income_tax.model_copy(update={"brackets": tuple(brackets)})
    broken = config.model_copy(update={"income_tax": income_tax})

    errors = validate_year_configuration(broken)

    assert any("income_tax.tax_brackets" in error and "decreases" in error for error in errors)


def test_validator_flags_unreachable_minimum_contribution() -> None:
    config = load_year_configuration(2024)
    practice = config.practice.model_copy(
        update={
            "social_security": config.practice.social_security.model_copy(
                update={"minimum_contribution": 1_000_000}
            )
        }
    )
    broken = config.model_copy(update={"practice": practice})

    errors = validate_year_configuration(broken)

    assert errors == [
        "practice.social_security: minimum contribution exceeds the contribution "
        "at the maximum assessment base"
    ]


def test_main_reports_success(capsys) -> None:
    assert main(["2024"]) == 0
    assert "[2024] OK" in capsys.readouterr().out


def test_main_reports_unknown_years(capsys) -> None:
    assert main(["1999"]) == 1
    assert "[1999] failed to load configuration" in capsys.readouterr().out
