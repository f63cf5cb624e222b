import pytest

from buildplan import Classpath, ConfigurationError, ToolDependency


def test_parse_compact_notation():
    dep = ToolDependency.parse("com.android.tools.build:gradle:8.7.3")
    assert dep.coordinate == "com.android.tools.build:gradle"
    assert dep.version == "8.7.3"
    assert dep.notation == "com.android.tools.build:gradle:8.7.3"


@pytest.mark.parametrize("notation", [
    "gradle",
    ":8.7.3",
    "com.android:gradle:",
    "com.android.tools.build:gradle",
    "com.android.tools.build::8.7.3",
])
def test_parse_rejects_malformed_notation(notation):
    with pytest.raises(ConfigurationError):
        ToolDependency.parse(notation)


@pytest.mark.parametrize("version", ["", " ", "8.7 .3", "-rc1", "8.7.3!"])
def test_malformed_version(version):
    with pytest.raises(ConfigurationError, match="Malformed version"):
        ToolDependency("kotlin-plugin", version)


@pytest.mark.parametrize("version", ["2.1.0", "8.7.0-alpha01", "1.9.20-Beta2", "31.0.0+build_7"])
def test_accepts_host_versions(version):
    assert ToolDependency("kotlin-plugin", version).version == version


def test_empty_coordinate_registers_nothing():
    cp = Classpath()
    with pytest.raises(ConfigurationError, match="must not be empty"):
        cp.extend([("android-gradle-plugin", "8.7.3"), ("", "2.1.0")])
    assert len(cp) == 0


def test_open_ended():
    cp = Classpath()
    cp.extend([
        "com.android.tools.build:gradle:8.7.3",
        "org.jetbrains.kotlin:kotlin-gradle-plugin:2.1.0",
    ])
    cp.extend(["com.google.gms:google-services:4.4.2"])
    assert [d.coordinate for d in cp] == [
        "com.android.tools.build:gradle",
        "org.jetbrains.kotlin:kotlin-gradle-plugin",
        "com.google.gms:google-services",
    ]


def test_conflicting_versions():
    cp = Classpath()
    cp.extend(["org.jetbrains.kotlin:kotlin-gradle-plugin:2.1.0"])
    with pytest.raises(ConfigurationError, match="Conflicting versions"):
        cp.extend(["org.jetbrains.kotlin:kotlin-gradle-plugin:2.0.0"])
    assert len(cp) == 1


def test_same_entry_twice_is_kept_once():
    cp = Classpath()
    cp.extend(["a:b:1.0", "a:b:1.0"])
    assert len(cp) == 1


def test_notation_without_version_registers_nothing():
    cp = Classpath()
    with pytest.raises(ConfigurationError, match="group:artifact:version"):
        cp.extend(["org.jetbrains.kotlin:kotlin-gradle-plugin:2.1.0", "com.android.tools.build:gradle"])
    assert len(cp) == 0


@pytest.mark.parametrize("pair", [("a:b",), ("a:b", "1.0", "extra"), ()])
def test_pair_with_wrong_arity(pair):
    with pytest.raises(ConfigurationError, match="coordinate, version"):
        Classpath().extend([pair])


@pytest.mark.parametrize("pair", [(42, "1.0"), ("kotlin-plugin", 2.1), (None, "1.0")])
def test_pair_with_non_string_items(pair):
    with pytest.raises(ConfigurationError, match="must be strings"):
        Classpath().extend([pair])


def test_non_string_notation():
    with pytest.raises(ConfigurationError):
        Classpath().extend([840])
