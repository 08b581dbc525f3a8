"""Tests for the filter query-string builder."""

import pytest

from safeguard_client.safeguardapi.filters import (
    Fields,
    Filter,
    FilterOperator,
    escape_value,
    is_wrapped,
    query_string,
)


def test_empty_filter_only_has_count():
    """The count parameter is always emitted."""
    assert Filter().to_query_string() == "?count=false"


def test_single_condition_is_wrapped_and_escaped():
    """A single condition is parenthesized and percent-encoded."""
    f = Filter()
    f.add_filter("Name", FilterOperator.EQUAL, "admin")
    assert f.to_query_string() == "?filter=%28Name%20eq%20%27admin%27%29&count=false"


def test_full_query_orders_parameters():
    """filter, fields, count and orderby appear in that order."""
    f = Filter(fields=["Id", "Name"], order_by=["Name"], count=True)
    f.add_filter("Name", FilterOperator.ICONTAINS, "web")
    f.add_filter("Disabled", FilterOperator.EQUAL, "false")

    assert f.to_query_string() == (
        "?filter=%28Name%20icontains%20%27web%27%20and%20Disabled%20eq%20%27false%27%29"
        "&fields=Id%2CName&count=true&orderby=Name"
    )


def test_multiple_conditions_are_anded():
    """Conditions are joined with 'and' inside one pair of parentheses."""
    f = Filter()
    f.add_filter("A", FilterOperator.GREATER_THAN, "1")
    f.add_filter("B", "lt", "2")
    assert f.filter_expression() == "(A gt '1' and B lt '2')"


def test_values_are_escaped():
    """Quotes, backslashes and asterisks in values are escaped."""
    f = Filter()
    f.add_filter("Name", FilterOperator.EQUAL, "o'brien*")
    assert f.filter_expression() == "(Name eq 'o\\'brien\\*')"


def test_query_delimiters_in_values_are_encoded():
    """Ampersands, plus and equals signs cannot split the query string."""
    f = Filter()
    f.add_filter("Name", FilterOperator.EQUAL, "A&B+C=D")
    assert f.to_query_string() == (
        "?filter=%28Name%20eq%20%27A%26B%2BC%3DD%27%29&count=false"
    )


@pytest.mark.parametrize(
    ("raw", "escaped"),
    [
        ("plain", "plain"),
        ("a\\b", "a\\\\b"),
        ("it's", "it\\'s"),
        ("wild*", "wild\\*"),
    ],
)
def test_escape_value(raw, escaped):
    """Each special character gets a backslash."""
    assert escape_value(raw) == escaped


def test_search_filter_is_not_double_wrapped():
    """An OR group that is the only filter keeps a single pair of parentheses."""
    f = Filter()
    f.add_search_filter(
        "x",
        {"Name": FilterOperator.ICONTAINS, "Description": FilterOperator.ICONTAINS},
    )
    assert f.filter_expression() == (
        "(Name icontains 'x' or Description icontains 'x')"
    )


def test_search_filter_combines_with_other_conditions():
    """A search group is ANDed with plain conditions."""
    f = Filter()
    f.add_filter("Disabled", FilterOperator.EQUAL, "false")
    f.add_search_filter("db", {"Name": FilterOperator.ICONTAINS, "Tags.Name": "icontains"})
    assert f.filter_expression() == (
        "(Disabled eq 'false' and (Name icontains 'db' or Tags.Name icontains 'db'))"
    )


def test_search_filter_defaults_to_account_fields():
    """Without explicit fields, the default account search fields are used."""
    f = Filter()
    f.add_search_filter("svc")
    expression = f.filter_expression()
    assert "Asset.Name icontains 'svc'" in expression
    assert "PrivilegeGroupMembership icontains 'svc'" in expression
    assert expression.count(" or ") == 8


def test_search_filter_with_no_fields_adds_nothing():
    """An empty field mapping leaves the filter untouched."""
    f = Filter()
    f.add_search_filter("x", {})
    assert f.filters == []


@pytest.mark.parametrize(
    ("expression", "wrapped"),
    [
        ("(a)", True),
        ("((a) and (b))", True),
        ("(a) and (b)", False),
        ("a and b", False),
        ("(a", False),
    ],
)
def test_is_wrapped(expression, wrapped):
    """Only a single enclosing pair of parentheses counts as wrapped."""
    assert is_wrapped(expression) is wrapped


def test_add_and_remove_fields_and_order():
    """Fields and ordering can be edited after construction."""
    f = Filter()
    f.add_field("Id")
    f.add_field("Name")
    f.remove_field("Id")
    f.remove_field("Missing")
    f.add_order_by("-Name")
    assert f.to_query_string() == "?fields=Name&count=false&orderby=-Name"


def test_fields_query_string():
    """A field list renders as a fields-only query string."""
    assert Fields(["Id", "Name"]).to_query_string() == "?fields=Id%2CName"
    assert Fields().to_query_string() == ""


def test_query_string_of_none_is_empty():
    """No filter means no query string."""
    assert query_string(None) == ""
