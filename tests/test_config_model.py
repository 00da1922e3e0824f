from cfgtree import ConfigTree, parse_config


def load_fixture() -> ConfigTree:
    raw = parse_config(
        """
        {
          server: { host: "localhost", port: "8080", tls: { } },
          name: "demo",
          empty: ""
        }
        """
    )
    return ConfigTree(raw)


def test_get_by_path() -> None:
    config = load_fixture()

    assert config.get("name") == "demo"
    assert config.get("server", "port") == "8080"
    assert config.get("server", "missing") is None
    assert config.get("server", "missing", default="x") == "x"


def test_section_strips_prefix() -> None:
    server = load_fixture().section("server")

    assert server.raw == {"host": "localhost", "port": "8080", "tls": ""}
    assert server.get("host") == "localhost"


def test_missing_section_is_empty() -> None:
    assert load_fixture().section("nope").raw == {}


def test_has_section() -> None:
    config = load_fixture()

    assert config.has_section("server")
    assert config.has_section("server", "tls")
    assert not config.has_section("name")
    assert not config.has_section("nope")


def test_keys_are_top_level_names() -> None:
    assert load_fixture().keys() == ["empty", "name", "server"]


def test_missing_paths() -> None:
    config = load_fixture()

    missing = config.missing(("name",), ("server", "host"), ("server", "user"), ("db",))

    assert list(missing) == [("server", "user"), ("db",)]
