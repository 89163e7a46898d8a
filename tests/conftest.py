"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import pytest
import sys
from pathlib import Path

from loguru import logger

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (file-backed SQLite catalog)")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def deduplicator():
    """A fresh warning deduplicator (independent of the process singleton)."""
    from src.core.log_dedup import WarningDeduplicator

    return WarningDeduplicator()


@pytest.fixture
def captured_logs():
    """Collect loguru records at WARNING and above while the test runs."""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="WARNING")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def sample_reading_config():
    """A persisted reading config written by an older editor revision."""
    return {
        "version": 1,
        "instructions": "Answer all questions.",
        "timing": {"enabled": True, "durationMinutes": "45", "enforce": False},
        "attempts": {"maxAttempts": 2},
        "sections": [
            {
                "id": "sec-1",
                "title": "Passage 1",
                "passage": "The history of tea...",
                "questions": [
                    {
                        "id": "q-1",
                        "type": "multiple_choice",
                        "prompt": "Where did tea originate?",
                        "options": ["China", "India", "Kenya"],
                        "correctAnswer": "0",
                    },
                    {
                        "id": "q-2",
                        "type": "true_false_not_given",
                        "prompt": "Tea was first drunk cold.",
                        "options": [""],
                        "correctAnswer": "Not Given",
                    },
                    {
                        "id": "q-3",
                        "type": "summary_completion",
                        "prompt": "Complete the summary.",
                        "options": ["leaves"],
                        "correctAnswer": "",
                    },
                ],
            }
        ],
    }


@pytest.fixture
def sample_catalog_payload():
    """A well-formed catalog payload as CatalogService.fetch_catalog returns it."""
    def option(option_id, label, order, **extra):
        return {
            "id": option_id,
            "label": label,
            "description": None,
            "enabled": True,
            "sort_order": order,
            **extra,
        }

    return {
        "version": 1,
        "assignment_types": [option("reading", "Reading", 1, icon="book-open")],
        "question_types": {
            "reading": [option("multiple_choice", "Multiple Choice", 1, skill_type="reading")],
            "listening": [option("matching", "Matching", 1, skill_type="listening")],
        },
        "writing_task_types": {
            "task1": [option("line_graph", "Line Graph", 1, task_number=1)],
            "task2": [option("opinion", "Opinion Essay", 1, task_number=2)],
        },
        "speaking_part_types": [option("part1_personal", "Part 1: Personal Questions", 1)],
        "completion_formats": [option("summary", "Summary Completion", 1)],
        "sample_timing_options": [option("immediate", "Immediately", 1)],
    }
