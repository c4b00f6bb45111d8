"""Unit tests for the decompile service."""

import pytest

from sketchback.core.exceptions import MalformedLogicTree, MalformedViewTree
from sketchback.services.decompile import DecompileInput, DecompileService

MAIN_LAYOUT = "res/layout/main.xml"
SECOND_LAYOUT = "res/layout/second.xml"
MAIN_SOURCE = "java/com/example/demo/MainActivity.java"
SECOND_SOURCE = "java/com/example/demo/SecondActivity.java"


class TestDecompile:
    """End-to-end decompile runs."""

    @pytest.mark.parametrize("backup", ["framed_backup", "zip_backup", "section_folder"])
    def test_all_inputs_generate_everything(self, request, storage, backup):
        source = request.getfixturevalue(backup)
        result = DecompileService(storage).decompile(DecompileInput(source=source))

        assert result.success
        assert result.data.package_name == "com.example.demo"
        assert result.data.layout_keys == [MAIN_LAYOUT, SECOND_LAYOUT]
        assert result.data.source_keys == [MAIN_SOURCE, SECOND_SOURCE]
        assert storage.list_keys() == sorted([MAIN_LAYOUT, SECOND_LAYOUT, MAIN_SOURCE, SECOND_SOURCE])
        assert result.metadata["duration_ms"] >= 0

    def test_generated_content(self, storage, framed_backup):
        DecompileService(storage).decompile(DecompileInput(source=framed_backup))

        layout = storage.load_text(MAIN_LAYOUT)
        assert layout.count("<Button") == 1
        assert 'android:id="@+id/button1"' in layout

        source = storage.load_text(MAIN_SOURCE)
        assert "private Button button1;" in source
        assert source.count("button1 = findViewById(R.id.button1);") == 1
        assert "public void _button1_onClick(final View _view) {" in source

        second = storage.load_text(SECOND_SOURCE)
        assert "public class SecondActivity extends Activity {" in second
        assert "findViewById" not in second
        assert "SOFT_INPUT_STATE_ALWAYS_HIDDEN" in second

    def test_restrict_to_layout(self, storage, framed_backup):
        result = DecompileService(storage).decompile(DecompileInput(source=framed_backup, layouts=["second"]))
        assert result.data.layout_keys == [SECOND_LAYOUT]
        assert result.data.source_keys == [MAIN_SOURCE, SECOND_SOURCE]
        assert storage.list_keys() == sorted([SECOND_LAYOUT, MAIN_SOURCE, SECOND_SOURCE])

    def test_restrict_to_activity(self, storage, framed_backup):
        result = DecompileService(storage).decompile(
            DecompileInput(source=framed_backup, activities=["MainActivity"])
        )
        assert result.data.layout_keys == [MAIN_LAYOUT, SECOND_LAYOUT]
        assert result.data.source_keys == [MAIN_SOURCE]
        assert result.data.screens == ["main", "second"]

    def test_restrict_both(self, storage, framed_backup):
        result = DecompileService(storage).decompile(
            DecompileInput(source=framed_backup, layouts=["main"], activities=["SecondActivity"])
        )
        assert result.data.keys == [MAIN_LAYOUT, SECOND_SOURCE]

    def test_layout_only(self, storage, framed_backup):
        result = DecompileService(storage).decompile(DecompileInput(source=framed_backup, layout_only=True))
        assert result.data.source_keys == []
        assert storage.list_keys() == [MAIN_LAYOUT, SECOND_LAYOUT]

    def test_java_only(self, storage, framed_backup):
        result = DecompileService(storage).decompile(DecompileInput(source=framed_backup, java_only=True))
        assert result.data.layout_keys == []
        assert storage.list_keys() == [MAIN_SOURCE, SECOND_SOURCE]

    def test_custom_view_gets_layout_only(self, storage, section_folder, sample_sections):
        view = sample_sections["view"] + "@row.xml\nrow_root\tLinearLayout\t\t\n"
        files = sample_sections["file"] + "@customview\nrow\n"
        (section_folder / "view").write_text(view, encoding="utf-8")
        (section_folder / "file").write_text(files, encoding="utf-8")

        result = DecompileService(storage).decompile(DecompileInput(source=section_folder))
        assert "res/layout/row.xml" in result.data.layout_keys
        assert not any("RowActivity" in key for key in result.data.source_keys)


class TestValidation:
    """Argument validation returns failed results."""

    def test_exclusive_modes(self, storage, framed_backup):
        result = DecompileService(storage).decompile(
            DecompileInput(source=framed_backup, layout_only=True, java_only=True)
        )
        assert not result.success
        assert "mutually exclusive" in result.error
        assert storage.list_keys() == []

    def test_unknown_activity(self, storage, framed_backup):
        result = DecompileService(storage).decompile(
            DecompileInput(source=framed_backup, activities=["NopeActivity"])
        )
        assert not result.success
        assert "NopeActivity" in result.error

    @pytest.mark.parametrize(
        "options",
        [{"java_only": True, "layouts": ["main"]}, {"layout_only": True, "activities": ["MainActivity"]}],
    )
    def test_restriction_conflicts_with_mode(self, storage, framed_backup, options):
        result = DecompileService(storage).decompile(DecompileInput(source=framed_backup, **options))
        assert not result.success
        assert "cannot restrict" in result.error
        assert storage.list_keys() == []

    def test_missing_input(self, storage, temp_dir):
        result = DecompileService(storage).decompile(DecompileInput(source=temp_dir / "absent.skbk"))
        assert not result.success


class TestFailures:
    """Decoding failures abort the run before anything is written."""

    def test_depth_jump_writes_nothing(self, storage, section_folder, sample_sections):
        logic = sample_sections["logic"].replace("20\t0\tshowMessage", "20\t2\tshowMessage")
        (section_folder / "logic").write_text(logic, encoding="utf-8")

        with pytest.raises(MalformedLogicTree) as exc_info:
            DecompileService(storage).decompile(DecompileInput(source=section_folder))
        assert exc_info.value.block_id == "20"
        assert storage.list_keys() == []

    def test_missing_parent_names_screen(self, storage, section_folder, sample_sections):
        view = sample_sections["view"].replace("imageview1\tImageView\tframe1", "imageview1\tImageView\tframe9")
        (section_folder / "view").write_text(view, encoding="utf-8")

        with pytest.raises(MalformedViewTree) as exc_info:
            DecompileService(storage).decompile(DecompileInput(source=section_folder))
        assert exc_info.value.screen == "second"
        assert storage.list_keys() == []

    def test_logic_without_layout(self, storage, section_folder, sample_sections):
        logic = sample_sections["logic"] + "@ThirdActivity.java_onStart\n"
        (section_folder / "logic").write_text(logic, encoding="utf-8")

        with pytest.raises(MalformedLogicTree) as exc_info:
            DecompileService(storage).decompile(DecompileInput(source=section_folder))
        assert exc_info.value.screen == "ThirdActivity"
