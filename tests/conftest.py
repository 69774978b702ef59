"""
Pytest configuration and fixtures for kilter heatmap tests.
"""

# pylint: disable=redefined-outer-name  # standard pytest fixture pattern

import json
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
import yaml
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app import create_app
from src.config import Settings, clear_config_cache, get_settings_override
from src.heatmap.geometry import BoardGeometry
from src.heatmap.loader import reset_board_data_cache
from src.heatmap.models import AngleUsageMap, HoldLayout, parse_hold_layout, parse_usage_map


@pytest.fixture(autouse=True)
def clear_caches() -> Generator[None, None, None]:
    """Clear configuration and dataset caches before and after each test."""
    clear_config_cache()
    reset_board_data_cache()
    yield
    clear_config_cache()
    reset_board_data_cache()


@pytest.fixture
def raw_usage_map() -> dict[str, Any]:
    """Provide a raw two-angle usage map as it appears in the JSON file."""
    return {
        "20": {
            "holds": {
                "H1": {"V3": 2, "V4": 1},
                "H2": {"V4": 3},
            },
            "boulders": {
                "b-1": {"grade": "V3", "name": "One"},
                "b-2": {"grade": "V4", "name": "Two"},
            },
        },
        "40": {
            "holds": {
                "H1": {"V3": 5},
                "H3": {"V6": 4, "V3": 1},
            },
            "boulders": {
                "b-2": {"grade": "V4", "name": "Two"},
                "b-3": {"grade": "V6", "name": "Three"},
                "b-4": {"grade": "V3", "name": "Four"},
            },
        },
    }


@pytest.fixture
def usage_map(raw_usage_map: dict[str, Any]) -> AngleUsageMap:
    """Provide the parsed two-angle usage map."""
    return parse_usage_map(raw_usage_map)


@pytest.fixture
def raw_hold_layout() -> dict[str, Any]:
    """Provide a raw hold layout over two board images."""
    return {
        "bolt-ons.png": [
            ["H1", "M1", 8, 100],
            ["H2", "M2", 16, 120],
        ],
        "screw-ons.png": [
            ["H3", "M3", 24, 60],
            ["H4", "M4", 32, 40],
        ],
    }


@pytest.fixture
def hold_layout(raw_hold_layout: dict[str, Any]) -> HoldLayout:
    """Provide the parsed hold layout."""
    return parse_hold_layout(raw_hold_layout)


@pytest.fixture
def geometry() -> BoardGeometry:
    """Provide the default board geometry."""
    return BoardGeometry()


@pytest.fixture
def data_files(
    tmp_path: Path, raw_hold_layout: dict[str, Any], raw_usage_map: dict[str, Any]
) -> tuple[Path, Path]:
    """Write the hold layout and usage map to JSON files."""
    hold_map_path = tmp_path / "full-hold-map.json"
    usage_map_path = tmp_path / "angle-hold-boulder-grade-map.json"
    hold_map_path.write_text(json.dumps(raw_hold_layout), encoding="utf-8")
    usage_map_path.write_text(json.dumps(raw_usage_map), encoding="utf-8")
    return hold_map_path, usage_map_path


@pytest.fixture
def board_config_data() -> dict[str, Any]:
    """Provide a valid board configuration dictionary."""
    return {
        "board": {
            "image_width": 1080,
            "image_height": 1350,
            "edge_left": 0,
            "edge_right": 144,
            "edge_bottom": 0,
            "edge_top": 180,
            "excluded_y_pixels": [30, 90, 150],
            "marker_scale": 1.5,
        },
        "palette": {
            "colors": ["#bd0026", "#fd8d3c", "#fecc5c", "#ffffb2", "#d4f7b2"],
        },
    }


@pytest.fixture
def test_config_yaml(tmp_path: Path, board_config_data: dict[str, Any]) -> Path:
    """Write a valid board configuration YAML file."""
    config_file = tmp_path / "board_config.yaml"
    config_file.write_text(yaml.safe_dump(board_config_data), encoding="utf-8")
    return config_file


@pytest.fixture
def invalid_config_yaml(tmp_path: Path) -> Path:
    """Write a board configuration file with invalid YAML syntax."""
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text("board: [unclosed\n  image_width: 1080", encoding="utf-8")
    return config_file


@pytest.fixture
def empty_config_yaml(tmp_path: Path) -> Path:
    """Write an empty board configuration file."""
    config_file = tmp_path / "empty_config.yaml"
    config_file.write_text("", encoding="utf-8")
    return config_file


@pytest.fixture
def app_overrides(data_files: tuple[Path, Path], test_config_yaml: Path) -> dict[str, Any]:
    """Provide settings overrides pointing at the temporary data files."""
    hold_map_path, usage_map_path = data_files
    return {
        "testing": True,
        "hold_map_path": str(hold_map_path),
        "usage_map_path": str(usage_map_path),
        "board_config_path": str(test_config_yaml),
    }


@pytest.fixture
def app_settings(app_overrides: dict[str, Any]) -> Settings:
    """Provide the settings used by the test application."""
    return get_settings_override(app_overrides)


@pytest.fixture
def app(app_overrides: dict[str, Any]) -> FastAPI:
    """Create a test application backed by the temporary data files."""
    return create_app(app_overrides)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Provide a test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client
