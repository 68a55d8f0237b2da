import re
from typing import List, Mapping

from dbtypes.descriptor import CONNECTION_SPEC_KEY, DbSpecificOption, DbType

_TOKEN_RE = re.compile(r"[<>]|[^<>]+")


def extract_options(props: Mapping[str, str]) -> List[DbSpecificOption]:
    """Discover the parameters referenced by a descriptor's ``connectionSpec``.

    The template is scanned token by token: ``<`` opens a parameter, ``>``
    closes it and any text seen while a parameter is open is its name.
    Unbalanced delimiters are not an error. Each name is returned once, in
    order of first appearance, with its description taken from the
    descriptor key of the same name.
    """
    spec = props.get(CONNECTION_SPEC_KEY)
    if not spec:
        return []

    options: List[DbSpecificOption] = []
    seen = set()
    in_param = False
    for token in _TOKEN_RE.findall(spec):
        if token == "<":
            in_param = True
        elif token == ">":
            in_param = False
        elif in_param and token not in seen:
            seen.add(token)
            options.append(DbSpecificOption(name=token, description=props.get(token)))
    return options


def format_usage(db_type: DbType) -> str:
    """Render the options a database type needs, one per line."""
    lines = [f" {db_type.name} - {db_type}"]
    for option in db_type.options:
        suffix = f"  \t{option.description}" if option.description is not None else ""
        lines.append(f"   {option.name}: {suffix}")
    lines.append("")
    return "\n".join(lines) + "\n"
