"""Unit tests for project loading, validation and rendering."""

import pytest
import yaml

from muxproj.core.models import ProjectOptions
from muxproj.core.project import (
    Project,
    load_project,
    parse_settings,
    project_file,
)
from muxproj.utils.logging import ResolutionError, ValidationError

MINIMAL = {"name": "demo", "windows": [{"shell": None}]}


class TestProjectFile:
    """Test which file an options bag selects."""

    def test_explicit_config_wins_over_name(self, locator, write_project, tmp_path):
        """project_config is used even when the named project exists."""
        write_project("named", "name: named\n")
        explicit = tmp_path / "explicit.yml"
        explicit.write_text("name: explicit\n")

        options = ProjectOptions(name="named", project_config=explicit)
        assert project_file(options, locator) == explicit

    def test_missing_explicit_config(self, locator, tmp_path):
        """A missing explicit config is a resolution error."""
        options = ProjectOptions(project_config=tmp_path / "missing.yml")
        with pytest.raises(ResolutionError, match=r"Project config \(.*missing.yml\) doesn't exist."):
            project_file(options, locator)

    def test_named_project(self, locator, write_project):
        """A name resolves through the locator."""
        path = write_project("blog", "name: blog\n")
        assert project_file(ProjectOptions(name="blog"), locator) == path

    def test_missing_named_project(self, locator):
        """An unknown name is a resolution error."""
        with pytest.raises(ResolutionError, match="Project blog doesn't exist."):
            project_file(ProjectOptions(name="blog"), locator)

    def test_local_project(self, locator, workdir):
        """Without name or config the local file is used."""
        local = workdir / ".muxproj.yml"
        local.write_text("name: here\n")
        assert project_file(ProjectOptions(), locator) == local

    def test_nothing_to_start(self, locator):
        """No name, no config and no local file is a resolution error."""
        with pytest.raises(ResolutionError, match="Cannot find a project to start."):
            project_file(ProjectOptions(), locator)


class TestLoadProject:
    """Test rendering and parsing of project files."""

    def test_args_and_settings_are_rendered(self, locator, write_project):
        """Positional args and key=value settings feed the template."""
        write_project(
            "tpl",
            "name: {{ args[0] }}\n"
            "root: /srv/{{ settings['env'] }}\n"
            "windows:\n"
            "  - main: echo hi\n",
        )
        options = ProjectOptions(name="tpl", args=("site", "env=prod"))

        project = load_project(options, locator)

        assert project.name == "site"
        assert project.root == "/srv/prod"

    def test_invalid_yaml(self, locator, write_project):
        """YAML errors become validation errors."""
        write_project("bad", "name: [oops\n")
        with pytest.raises(ValidationError, match="Failed to parse project file"):
            load_project(ProjectOptions(name="bad"), locator)

    def test_invalid_template(self, locator, write_project):
        """Template syntax errors become validation errors."""
        write_project("bad", "name: {{ oops\n")
        with pytest.raises(ValidationError, match="Failed to render project file"):
            load_project(ProjectOptions(name="bad"), locator)

    def test_non_mapping(self, locator, write_project):
        """A file that is not a mapping is rejected."""
        write_project("bad", "- just\n- a list\n")
        with pytest.raises(ValidationError, match="must contain a mapping"):
            load_project(ProjectOptions(name="bad"), locator)

    def test_project_is_validated(self, locator, write_project):
        """Loading validates before returning."""
        write_project("empty", "name: empty\n")
        with pytest.raises(ValidationError, match="should include some windows"):
            load_project(ProjectOptions(name="empty"), locator)

    def test_parse_settings(self):
        """Only key=value arguments become settings."""
        assert parse_settings(("a", "k=v", "x=1=2")) == {"k": "v", "x": "1=2"}


class TestProjectValidation:
    """Test semantic checks."""

    def test_valid(self):
        """A named project with windows validates."""
        assert Project(MINIMAL).validate().name == "demo"

    def test_missing_windows(self):
        """Projects must declare windows."""
        with pytest.raises(ValidationError, match="should include some windows"):
            Project({"name": "demo"}).validate()

    def test_missing_name(self):
        """Projects must declare a name."""
        with pytest.raises(ValidationError, match="didn't specify a 'project_name'"):
            Project({"windows": [{"a": None}]}).validate()

    def test_attach_and_detach_conflict(self):
        """Both overrides at once are rejected."""
        options = ProjectOptions(force_attach=True, force_detach=True)
        with pytest.raises(ValidationError, match="Cannot force_attach and force_detach"):
            Project(MINIMAL, options).validate()

    def test_malformed_window(self):
        """Windows must be single-key mappings."""
        with pytest.raises(ValidationError, match="single-key mapping"):
            Project({"name": "demo", "windows": ["bare"]}).validate()

    def test_windows_must_be_a_list(self):
        """A mapping in place of the windows list is rejected."""
        with pytest.raises(ValidationError, match="must be a list"):
            Project({"name": "demo", "windows": {"a": "b"}}).validate()


class TestProjectSettings:
    """Test derived project properties."""

    def test_custom_name_wins(self):
        """A custom session name overrides the file."""
        project = Project(MINIMAL, ProjectOptions(custom_name="other"))
        assert project.name == "other"

    def test_name_is_sanitized(self):
        """Dots and colons are not valid in tmux session names."""
        assert Project({"name": "my.app:dev"}).name == "my_app_dev"

    def test_project_name_and_project_root_aliases(self):
        """project_name and project_root are accepted."""
        project = Project({"project_name": "p", "project_root": "/srv"})
        assert project.name == "p"
        assert project.root == "/srv"

    @pytest.mark.parametrize(
        "data,options,expected",
        [
            ({}, ProjectOptions(), True),
            ({"attach": False}, ProjectOptions(), False),
            ({"attach": False}, ProjectOptions(force_attach=True), True),
            ({"attach": True}, ProjectOptions(force_detach=True), False),
        ],
    )
    def test_attach(self, data, options, expected):
        """Overrides beat the attach key, which defaults to true."""
        assert Project(data, options).attach is expected

    def test_tmux_command(self):
        """Socket name and tmux options extend the tmux invocation."""
        project = Project(
            {"tmux_command": "byobu", "socket_name": "work", "tmux_options": "-f ~/.tmux.conf"}
        )
        assert project.tmux == "byobu -L work -f ~/.tmux.conf"

    def test_window_forms(self):
        """Windows accept a command, a pane list or a mapping."""
        project = Project(
            {
                "name": "demo",
                "root": "/srv",
                "windows": [
                    {"cmd": "htop"},
                    {"list": ["vim", ["cd lib", "ls"]]},
                    {
                        "full": {
                            "layout": "main-vertical",
                            "root": "sub",
                            "pre": "source env",
                            "panes": [{"logs": ["tail -f log"]}, "top"],
                        }
                    },
                ],
            }
        )

        cmd, listed, full = project.windows
        assert cmd.panes[0].commands == ["htop"]
        assert [p.commands for p in listed.panes] == [["vim"], ["cd lib", "ls"]]
        assert full.layout == "main-vertical"
        assert full.root == "/srv/sub"
        assert full.pre == ["source env"]
        assert full.panes[0].title == "logs"
        assert full.panes[0].commands == ["tail -f log"]
        assert full.panes[1].commands == ["top"]

    def test_deprecations(self):
        """Legacy options produce ordered warnings."""
        project = Project({"name": "p", "tabs": [{"a": None}], "cli_args": "-2", "post": "x"})

        deprecations = project.deprecations

        assert len(deprecations) == 3
        assert "tabs option" in deprecations[0]
        assert "cli_args option" in deprecations[1]
        assert "post option" in deprecations[2]
        assert project.windows[0].name == "a"
        assert project.tmux.endswith("-2")
        assert project.on_project_stop == ["x"]

    def test_no_deprecations(self):
        """Current options produce no warnings."""
        assert Project(MINIMAL).deprecations == []


class TestRendering:
    """Test generated scripts."""

    def test_render_start_script(self, sample_project_yaml):
        """The start script creates windows, panes and attaches."""
        project = Project(yaml.safe_load(sample_project_yaml)).validate()

        script = project.render()

        assert script.startswith("#!/usr/bin/env bash")
        assert "cd /tmp/sample" in script
        assert "has-session -t sample" in script
        assert "new-session -d -s sample -n editor -c /tmp/sample" in script
        assert "new-window -t sample:$((BASE_INDEX + 1)) -n server" in script
        assert "split-window -t sample:$((BASE_INDEX + 0))" in script
        assert "send-keys -t sample:$((BASE_INDEX + 0)).$((PANE_BASE_INDEX + 1)) 'git status' C-m" in script
        assert "select-layout -t sample:$((BASE_INDEX + 0)) main-vertical" in script
        assert "attach-session -t sample" in script

    def test_render_detached(self):
        """Detached projects do not attach."""
        project = Project(MINIMAL, ProjectOptions(force_detach=True)).validate()
        assert "attach-session" not in project.render()

    def test_render_hooks_and_pre_window(self):
        """Start hooks run first and pre_window precedes pane commands."""
        project = Project(
            {
                "name": "demo",
                "on_project_start": ["echo start"],
                "pre_window": "source .env",
                "windows": [{"w": "make"}],
            }
        ).validate()

        script = project.render()

        assert "echo start" in script
        assert script.index("'source .env' C-m") < script.index("make C-m")

    def test_kill_script(self):
        """The stop script kills the session and runs stop hooks."""
        project = Project(
            {"name": "demo", "socket_name": "s", "on_project_stop": "echo bye", "windows": [{"a": None}]}
        ).validate()

        script = project.kill()

        assert "tmux -L s kill-session -t demo" in script
        assert "echo bye" in script
