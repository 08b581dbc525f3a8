"""Query-string builder for Safeguard collection endpoints.

The appliance accepts ``filter``, ``fields``, ``count`` and ``orderby``
query parameters. A :class:`Filter` collects conditions and renders them
in the form the appliance expects, e.g.::

    f = Filter()
    f.add_filter("Name", FilterOperator.ICONTAINS, "admin")
    f.to_query_string()
    # "?filter=%28Name%20icontains%20%27admin%27%29&count=false"
"""

from dataclasses import dataclass, field
from enum import Enum
from urllib.parse import quote


class FilterOperator(str, Enum):
    """Comparison and logical operators understood by the appliance."""

    EQUAL = "eq"
    NOT_EQUAL = "ne"
    GREATER_THAN = "gt"
    GREATER_THAN_OR_EQUAL = "ge"
    LESS_THAN = "lt"
    LESS_THAN_OR_EQUAL = "le"
    AND = "and"
    OR = "or"
    NOT = "not"
    CONTAINS = "contains"
    IEQUAL = "ieq"
    ICONTAINS = "icontains"
    STARTS_WITH = "sw"
    ISTARTS_WITH = "isw"
    ENDS_WITH = "ew"
    IENDS_WITH = "iew"
    IN = "in"


# Fields searched by Filter.add_search_filter when none are given
DEFAULT_SEARCH_FIELDS: dict[str, FilterOperator] = {
    "Name": FilterOperator.ICONTAINS,
    "DomainName": FilterOperator.ICONTAINS,
    "AccountNamespace": FilterOperator.ICONTAINS,
    "Asset.Name": FilterOperator.ICONTAINS,
    "PasswordProfile.EffectiveName": FilterOperator.ICONTAINS,
    "SshKeyProfile.EffectiveName": FilterOperator.ICONTAINS,
    "Description": FilterOperator.ICONTAINS,
    "Tags.Name": FilterOperator.ICONTAINS,
    "PrivilegeGroupMembership": FilterOperator.ICONTAINS,
}


def escape_value(value: str) -> str:
    """Escape backslash, single quote and asterisk for use in a filter."""
    return value.replace("\\", "\\\\").replace("'", "\\'").replace("*", "\\*")


def _query_escape(value: str) -> str:
    # Every reserved character is escaped, "&" and "=" too
    return quote(value, safe="")


def _condition(field_name: str, operator: FilterOperator | str, value: str) -> str:
    op = operator.value if isinstance(operator, FilterOperator) else operator
    return f"{field_name} {op} '{escape_value(value)}'"


def is_wrapped(expression: str) -> bool:
    """Return True if the whole expression sits inside one pair of parentheses."""
    expression = expression.strip()
    if not (expression.startswith("(") and expression.endswith(")")):
        return False

    depth = 0
    for i, char in enumerate(expression):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if depth < 0:
            return False
        # Closed before the final character: "(a) and (b)"
        if depth == 0 and i < len(expression) - 1:
            return False
    return depth == 0


class Fields(list[str]):
    """A list of field names to request from the appliance."""

    def to_query_string(self) -> str:
        if not self:
            return ""
        return "?fields=" + _query_escape(",".join(self))


@dataclass
class Filter:
    """Filter, field selection, ordering and count flag for a list request."""

    fields: list[str] = field(default_factory=list)
    filters: list[str] = field(default_factory=list)
    order_by: list[str] = field(default_factory=list)
    count: bool = False

    def add_field(self, name: str) -> None:
        self.fields.append(name)

    def remove_field(self, name: str) -> None:
        if name in self.fields:
            self.fields.remove(name)

    def add_order_by(self, name: str) -> None:
        self.order_by.append(name)

    def remove_order_by(self, name: str) -> None:
        if name in self.order_by:
            self.order_by.remove(name)

    def add_filter(
        self,
        field_name: str,
        operator: FilterOperator | str,
        value: str,
    ) -> None:
        """Add a ``field op 'value'`` condition, ANDed with existing ones."""
        self.filters.append(_condition(field_name, operator, value))

    def add_search_filter(
        self,
        value: str,
        search_fields: dict[str, FilterOperator] | None = None,
    ) -> None:
        """Add one OR group matching ``value`` against several fields.

        Args:
            value: Text to search for.
            search_fields: Mapping of field name to operator. Defaults to
                :data:`DEFAULT_SEARCH_FIELDS`.
        """
        search_fields = (
            DEFAULT_SEARCH_FIELDS if search_fields is None else search_fields
        )
        if not search_fields:
            return

        conditions = [
            _condition(name, operator, value)
            for name, operator in search_fields.items()
        ]
        group = f" {FilterOperator.OR.value} ".join(conditions)
        if len(conditions) > 1:
            group = f"({group})"
        self.filters.append(group)

    def filter_expression(self) -> str:
        """Return the unescaped filter expression, or "" when empty."""
        if not self.filters:
            return ""
        expression = f" {FilterOperator.AND.value} ".join(self.filters)
        if len(self.filters) > 1 or not is_wrapped(expression):
            expression = f"({expression})"
        return expression

    def to_query_string(self) -> str:
        """Render the filter as a query string starting with ``?``.

        The ``count`` parameter is always present.
        """
        params = []
        if expression := self.filter_expression():
            params.append("filter=" + _query_escape(expression))
        if self.fields:
            params.append("fields=" + _query_escape(",".join(self.fields)))
        params.append("count=true" if self.count else "count=false")
        if self.order_by:
            params.append("orderby=" + _query_escape(",".join(self.order_by)))
        return "?" + "&".join(params)


def query_string(filter_: Filter | None) -> str:
    """Return ``filter_.to_query_string()``, or "" when no filter is given."""
    return filter_.to_query_string() if filter_ is not None else ""
