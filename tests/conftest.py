from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture
def minimal_md() -> Path:
    return FIXTURES / "minimal.md"


@pytest.fixture
def minimal_kml() -> Path:
    return FIXTURES / "minimal.kml"


def kml_document(body: str) -> str:
    """Wrap Document content in a namespaced kml root."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<kml xmlns="http://www.opengis.net/kml/2.2"><Document>'
        f"{body}"
        "</Document></kml>"
    )


def placemark(name: str, coords: str = "", description: str = "") -> str:
    point = f"<Point><coordinates>{coords}</coordinates></Point>" if coords else ""
    desc = f"<description><![CDATA[{description}]]></description>" if description else ""
    return f"<Placemark><name>{name}</name>{desc}{point}</Placemark>"


def folder(name: str, *children: str) -> str:
    return f"<Folder><name>{name}</name>{''.join(children)}</Folder>"
