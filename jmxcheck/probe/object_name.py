"""
MBean Object Names.

Parses `domain:key=value[,key=value...]` identifiers and reports whether a
name is a pattern that must be resolved against the endpoint before use.

A name is a pattern when:
    - the domain contains `*` or `?` (domain pattern), or
    - the property list holds a bare `*` entry, or a value containing
      an unquoted `*` or `?` (property pattern).
"""

from dataclasses import dataclass

from jmxcheck.core.exceptions import MalformedInputError

_WILDCARDS = ("*", "?")


def _split_properties(text: str) -> list[str]:
    """Split a property list on commas that are not inside a quoted value."""
    parts: list[str] = []
    current: list[str] = []
    quoted = False
    escaped = False
    for char in text:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\" and quoted:
            current.append(char)
            escaped = True
        elif char == '"':
            current.append(char)
            quoted = not quoted
        elif char == "," and not quoted:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    if quoted:
        raise MalformedInputError(f"Unterminated quoted value in object name properties [{text}]")
    parts.append("".join(current))
    return parts


def _has_unquoted_wildcard(value: str) -> bool:
    if value.startswith('"') and value.endswith('"') and len(value) >= 2:
        body = value[1:-1]
        # Escaped characters inside quotes are literal.
        escaped = False
        for char in body:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char in _WILDCARDS:
                return True
        return False
    return any(w in value for w in _WILDCARDS)


@dataclass(frozen=True)
class ObjectName:
    """A parsed MBean object name."""

    domain: str
    properties: tuple[tuple[str, str], ...]
    property_list_pattern: bool = False

    @classmethod
    def parse(cls, name: str) -> "ObjectName":
        """
        Parse an object name string.

        Raises:
            MalformedInputError: If the string is not a valid object name.
        """
        if not name or ":" not in name:
            raise MalformedInputError(f"Malformed object name [{name}]: missing domain separator ':'")

        domain, _, property_text = name.partition(":")
        if "\n" in domain:
            raise MalformedInputError(f"Malformed object name [{name}]: invalid domain")
        if not property_text:
            raise MalformedInputError(f"Malformed object name [{name}]: key properties cannot be empty")

        properties: list[tuple[str, str]] = []
        list_pattern = False
        seen: set[str] = set()
        for entry in _split_properties(property_text):
            if entry == "*":
                if list_pattern:
                    raise MalformedInputError(f"Malformed object name [{name}]: repeated '*'")
                list_pattern = True
                continue
            key, sep, value = entry.partition("=")
            if not sep or not key or not value:
                raise MalformedInputError(f"Malformed object name [{name}]: invalid key property [{entry}]")
            if any(c in key for c in ":=*?,\"\n"):
                raise MalformedInputError(f"Malformed object name [{name}]: invalid key [{key}]")
            if key in seen:
                raise MalformedInputError(f"Malformed object name [{name}]: duplicate key [{key}]")
            seen.add(key)
            properties.append((key, value))

        if not properties and not list_pattern:
            raise MalformedInputError(f"Malformed object name [{name}]: key properties cannot be empty")

        return cls(domain=domain, properties=tuple(properties), property_list_pattern=list_pattern)

    @property
    def is_domain_pattern(self) -> bool:
        return any(w in self.domain for w in _WILDCARDS)

    @property
    def is_property_value_pattern(self) -> bool:
        return any(_has_unquoted_wildcard(value) for _, value in self.properties)

    @property
    def is_property_pattern(self) -> bool:
        return self.property_list_pattern or self.is_property_value_pattern

    @property
    def is_pattern(self) -> bool:
        return self.is_domain_pattern or self.is_property_pattern

    @property
    def canonical_name(self) -> str:
        """Domain plus properties sorted by key, as the JMX canonical form."""
        props = ",".join(f"{k}={v}" for k, v in sorted(self.properties))
        if self.property_list_pattern:
            props = f"{props},*" if props else "*"
        return f"{self.domain}:{props}"
