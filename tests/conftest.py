"""Test configuration and fixtures for the user input panel tests."""

import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest

from userinput.conditions import RulesEngine
from userinput.config import InstallData
from userinput.model import PanelSpec
from userinput.panel import UserInputPanel
from userinput.platform_matcher import PlatformMatcher
from userinput.spec_source import StaticSpecificationSource
from userinput.views import FieldView


class RecordingHost:
    """PanelHost double recording every call."""

    def __init__(self) -> None:
        self.attached: list[FieldView] = []
        self.detached: list[FieldView] = []
        self.resets = 0
        self.errors: list[tuple[str, str]] = []
        self.skipped = 0

    def reset_view(self) -> None:
        self.resets += 1

    def attach(self, view: FieldView) -> None:
        self.attached.append(view)

    def detach(self, view: FieldView) -> None:
        self.detached.append(view)

    def emit_error(self, title: str, message: str) -> None:
        self.errors.append((title, message))

    def skip_panel(self) -> None:
        self.skipped += 1


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def install_data() -> InstallData:
    """Empty installation data with the 'core' pack selected."""
    return InstallData(selected_packs=["core"])


@pytest.fixture
def matcher() -> PlatformMatcher:
    """Matcher describing a Linux x86_64 machine."""
    return PlatformMatcher(system="Linux", machine="x86_64", release="6.1.0")


@pytest.fixture
def rules() -> RulesEngine:
    """Rules engine with a condition on the 'mode' variable."""
    return RulesEngine.from_declarations(
        {
            "advanced": {"type": "variable", "variable": "mode", "value": "advanced"},
            "has_docs": {"type": "packselection", "pack": "docs"},
        },
    )


@pytest.fixture
def host() -> RecordingHost:
    """A host recording the panel's calls."""
    return RecordingHost()


@pytest.fixture
def make_panel(install_data: InstallData, rules: RulesEngine, matcher: PlatformMatcher, host: RecordingHost):
    """Factory building a panel around a PanelSpec."""

    def factory(spec: PanelSpec | None) -> UserInputPanel:
        return UserInputPanel(StaticSpecificationSource(spec), install_data, rules, matcher, host)

    return factory


@pytest.fixture
def sample_spec_toml() -> str:
    """Sample specification document for testing."""
    return """
[conditions.advanced]
type = "variable"
variable = "mode"
value = "advanced"

[[panel]]
id = "paths"
topBuffer = 0
packs = ["core"]

[[panel.variable]]
name = "app.home"
value = "${INSTALL_PATH}/app"

[[panel.variable]]
name = "app.greeting"
value = { content = "Hello $USER_NAME" }

[[panel.variable]]
name = "win.only"
value = "yes"
os = [{ family = "windows" }]

[[panel.field]]
type = "title"
text = "Locations"

[[panel.field]]
type = "combo"
variable = "mode"
label = "Mode"
choices = [{ value = "simple", label = "Simple", selected = true }, { value = "advanced", label = "Advanced" }]

[[panel.field]]
type = "dir"
variable = "data.dir"
label = "Data directory"
default = "${app.home}/data"
must_exist = false
condition = "advanced"

[[panel]]
id = "extras"
unselected_packs = ["core"]

[[panel.field]]
type = "text"
variable = "extra"
"""


@pytest.fixture
def spec_file(temp_dir: Path, sample_spec_toml: str) -> Path:
    """Write the sample specification to disk."""
    path = temp_dir / "panels.toml"
    path.write_text(sample_spec_toml)
    return path
