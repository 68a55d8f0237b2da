"""Tests for extends/include resolution."""

import pytest

from dbtypes.errors import CyclicDescriptor, DescriptorNotFound, MalformedDirective
from dbtypes.resolver import DescriptorResolver, resolve


@pytest.fixture
def write_type(tmp_path):
    """Write <name>.properties into the search dir."""

    def _write(name, text):
        (tmp_path / f"{name}.properties").write_text(text)

    return _write


def test_extends_child_keys_win(tmp_path, write_type):
    write_type("base", "a=base-a\nb=base-b\nconnectionSpec=x://<host>\n")
    write_type("child", "extends = base \nb=child-b\nc=child-c\n")

    child = resolve("child", search_dir=tmp_path)
    parent = resolve("base", search_dir=tmp_path)

    for key, value in parent.props.items():
        if key != "b":
            assert child.props[key] == value
    assert child.props["b"] == "child-b"
    assert child.props["c"] == "child-c"
    assert "extends" not in child.props


def test_extends_is_transitive(tmp_path, write_type):
    write_type("grandparent", "a=1\nb=1\nc=1\n")
    write_type("parent", "extends=grandparent\nb=2\n")
    write_type("child", "extends=parent\nc=3\n")

    assert dict(resolve("child", search_dir=tmp_path).props) == {"a": "1", "b": "2", "c": "3"}


def test_include_copies_single_key(tmp_path, write_type):
    write_type("other", "wanted=from-other\nunwanted=nope\n")
    write_type("main", "include.1 = other :: wanted\nown=1\n")

    main = resolve("main", search_dir=tmp_path)

    assert main.props["wanted"] == resolve("other", search_dir=tmp_path).props["wanted"]
    assert "unwanted" not in main.props
    assert not any(key.startswith("include.") for key in main.props)


def test_include_resolves_referenced_type_fully(tmp_path, write_type):
    """The included value is taken after the other type's own inheritance."""
    write_type("root", "shared=root-value\n")
    write_type("middle", "extends=root\n")
    write_type("main", "include.1=middle::shared\n")

    assert resolve("main", search_dir=tmp_path).props["shared"] == "root-value"


def test_includes_are_applied_before_extends(tmp_path, write_type):
    """An included key belongs to the child, so it overrides the parent's key."""
    write_type("parent", "key=parent\n")
    write_type("donor", "key=donor\n")
    write_type("child", "extends=parent\ninclude.1=donor::key\n")

    assert resolve("child", search_dir=tmp_path).props["key"] == "donor"


def test_include_numbering_stops_at_gap(tmp_path, write_type, caplog):
    write_type("donor", "one=1\ntwo=2\nthree=3\n")
    write_type("main", "include.1=donor::one\ninclude.3=donor::three\n")

    main = resolve("main", search_dir=tmp_path)

    assert main.props["one"] == "1"
    assert "three" not in main.props
    assert "include.3" not in main.props
    assert "include.3" in caplog.text


def test_include_of_undefined_key_is_skipped(tmp_path, write_type, caplog):
    write_type("donor", "one=1\n")
    write_type("main", "include.1=donor::missing\ninclude.2=donor::one\n")

    main = resolve("main", search_dir=tmp_path)

    assert "missing" not in main.props
    assert main.props["one"] == "1"
    assert "missing" in caplog.text


def test_include_without_separator_is_malformed(tmp_path, write_type):
    write_type("main", "include.1=donor:key\n")

    with pytest.raises(MalformedDirective) as exc_info:
        resolve("main", search_dir=tmp_path)

    assert exc_info.value.directive == "include.1"
    assert "must have '::'" in str(exc_info.value)
    assert "main.properties" in str(exc_info.value)


def test_missing_parent_is_not_found(tmp_path, write_type):
    write_type("child", "extends=ghost\n")

    with pytest.raises(DescriptorNotFound) as exc_info:
        resolve("child", search_dir=tmp_path)

    assert exc_info.value.type_name == "ghost"


def test_extends_cycle_is_detected(tmp_path, write_type):
    write_type("a", "extends=b\n")
    write_type("b", "extends=a\n")

    with pytest.raises(CyclicDescriptor) as exc_info:
        resolve("a", search_dir=tmp_path)

    assert exc_info.value.chain == ("a", "b", "a")


def test_include_back_to_caller_is_a_cycle(tmp_path, write_type):
    write_type("a", "include.1=b::x\nx=1\n")
    write_type("b", "extends=a\n")

    with pytest.raises(CyclicDescriptor):
        resolve("a", search_dir=tmp_path)


def test_self_extension_is_a_cycle(tmp_path, write_type):
    write_type("a", "extends=a\n")

    with pytest.raises(CyclicDescriptor) as exc_info:
        resolve("a", search_dir=tmp_path)

    assert "a -> a" in str(exc_info.value)


def test_diamond_is_not_a_cycle(tmp_path, write_type):
    write_type("base", "x=base\n")
    write_type("left", "extends=base\nl=1\n")
    write_type("right", "extends=base\nr=1\n")
    write_type("top", "extends=left\ninclude.1=right::r\n")

    top = resolve("top", search_dir=tmp_path)

    assert dict(top.props) == {"x": "base", "l": "1", "r": "1"}


def test_resolution_is_idempotent(tmp_path, write_type):
    write_type("base", "a=1\nconnectionSpec=db://<host>/<database>\n")
    write_type("child", "extends=base\ninclude.1=base::a\nb=2\n")

    first = resolve("child", search_dir=tmp_path)
    second = resolve("child", search_dir=tmp_path)

    assert dict(first.props) == dict(second.props)
    assert first.options == second.options


def test_resolved_props_are_read_only(tmp_path, write_type):
    write_type("base", "a=1\n")

    resolved = resolve("base", search_dir=tmp_path)

    with pytest.raises(TypeError):
        resolved.props["a"] = "2"


def test_cached_resolver_returns_same_instance(tmp_path, write_type):
    write_type("base", "a=1\n")
    resolver = DescriptorResolver(search_dir=tmp_path, cache=True)

    assert resolver.resolve("base") is resolver.resolve("base")


def test_uncached_resolver_rereads_files(tmp_path, write_type):
    write_type("base", "a=1\n")
    resolver = DescriptorResolver(search_dir=tmp_path)
    first = resolver.resolve("base")

    write_type("base", "a=2\n")

    assert first.props["a"] == "1"
    assert resolver.resolve("base").props["a"] == "2"


def test_alter_supported_flag(tmp_path, write_type):
    write_type("yes", "supportsAlterProc=TRUE\n")
    write_type("no", "supportsAlterProc=nope\n")
    write_type("unset", "a=1\n")
    write_type("inherits", "extends=yes\n")

    assert resolve("yes", search_dir=tmp_path).alter_supported is True
    assert resolve("no", search_dir=tmp_path).alter_supported is False
    assert resolve("unset", search_dir=tmp_path).alter_supported is False
    assert resolve("inherits", search_dir=tmp_path).alter_supported is True


def test_options_come_from_resolved_template(tmp_path, write_type):
    write_type("base", "connectionSpec=db://<host>:<port>\nhost=the host\n")
    write_type("child", "extends=base\nport=the port\n")

    child = resolve("child", search_dir=tmp_path)

    assert [(o.name, o.description) for o in child.options] == [
        ("host", "the host"),
        ("port", "the port"),
    ]


def test_alter_supported_flag_is_not_trimmed(tmp_path, write_type):
    write_type("padded", "supportsAlterProc=true \n")

    assert resolve("padded", search_dir=tmp_path).props["supportsAlterProc"] == "true "
    assert resolve("padded", search_dir=tmp_path).alter_supported is False
