import re

import pytest

from mp4batch.model import VideoStatus
from mp4batch.video import VideoEntity, apply_status


@pytest.mark.parametrize("name", ["a.avi", "b.MKV", "c.mp4", "d", "e.tar.gz"])
def test_non_join_output_always_mp4(settings, name):
    v = VideoEntity(settings, input_file_name=name)
    assert v.output_file_name.endswith(".mp4")
    v2 = VideoEntity(settings, use_random_suffix=False, input_file_name=name)
    assert v2.output_file_name.endswith(".mp4")


def test_random_suffix_inserted_before_extension(settings):
    v = VideoEntity(settings, input_file_name="clip.avi")
    assert re.fullmatch(r"clip_[0-9a-f]{8}\.mp4", v.output_file_name)
    assert v.input_file_name == "clip.avi"


def test_no_random_suffix(settings):
    v = VideoEntity(settings, use_random_suffix=False, input_file_name="clip.mkv")
    assert v.output_file_name == "clip.mp4"


def test_join_target_output_equals_input(settings):
    v = VideoEntity(
        settings, is_join_target=True, use_random_suffix=True, input_file_name="all.mp4"
    )
    assert v.output_file_name == "all.mp4"


def test_missing_extension_appended_on_assignment(settings):
    v = VideoEntity(settings, use_random_suffix=False)
    v.input_file_name = "holiday"
    assert v.input_file_name == "holiday.mp4"
    assert v.output_file_name == "holiday.mp4"


def test_paths_resolve_under_configured_dirs(settings):
    leaf = VideoEntity(settings, use_random_suffix=False, input_file_name="a.avi")
    join = VideoEntity(settings, is_join_target=True, input_file_name="j.mp4")
    assert leaf.input_path == settings.source_dir / "a.avi"
    assert leaf.output_path == settings.dest_dir / "a.mp4"
    assert join.output_path == settings.join_dir / "j.mp4"


def test_apply_status_cascade(settings):
    join = VideoEntity(settings, is_join_target=True, input_file_name="j.mp4")
    kids = [VideoEntity(settings, input_file_name=n) for n in ("a", "b")]
    for k in kids:
        join.add_child(k)

    apply_status(join, VideoStatus.JOIN_ERROR)
    assert [k.status for k in kids] == [VideoStatus.BLANK, VideoStatus.BLANK]

    apply_status(join, VideoStatus.SUCCESSFUL, cascade_to_children=True)
    assert join.successful
    assert all(k.status is VideoStatus.SUCCESSFUL for k in kids)


def test_leaf_cannot_take_children(settings):
    leaf = VideoEntity(settings, input_file_name="a.mp4")
    with pytest.raises(ValueError):
        leaf.add_child(VideoEntity(settings, input_file_name="b.mp4"))


def test_input_exists_ignores_symlinks(settings):
    real = settings.source_dir / "real.mp4"
    real.write_bytes(b"x")
    (settings.source_dir / "link.mp4").symlink_to(real)
    assert VideoEntity(settings, input_file_name="real.mp4").input_exists()
    assert not VideoEntity(settings, input_file_name="link.mp4").input_exists()


@pytest.mark.parametrize("name", ["clip.MP4", "clip.Mp4"])
def test_uppercase_mp4_extension_is_lowercased(settings, name):
    v = VideoEntity(settings, use_random_suffix=False, input_file_name=name)
    assert v.output_file_name == "clip.mp4"
    assert v.input_file_name == name
