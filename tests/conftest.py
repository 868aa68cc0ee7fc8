import os

import pytest

# Must be set before any Qt binding creates the application
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


UNICODE_TREE = [
    "├─ src/",
    "│  ├─ main.py",
    "│  └─ util.py",
    "└─ README.md",
]

ASCII_TREE = [
    "+-- src/",
    "|  +-- main.py",
    "|  `-- util.py",
    "`-- README.md",
]


@pytest.fixture
def unicode_tree():
    return list(UNICODE_TREE)


@pytest.fixture
def ascii_tree():
    return list(ASCII_TREE)


@pytest.fixture(scope="session")
def qapp():
    """A QApplication shared by every Qt test, skipped without a Qt binding"""
    QtWidgets = pytest.importorskip("Qt.QtWidgets")
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    yield app
