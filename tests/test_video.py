import subprocess

import pytest

from quatfractal.video import encoders
from quatfractal.video.encoders import cleanup_frames, collect_frames, encode_with_ffmpeg


def touch_frames(d, n, prefix="fractal"):
    paths = []
    for i in range(n):
        p = d / f"{prefix}_{i:03d}.ppm"
        p.write_bytes(b"P6\n1 1\n255\n\x00\x00\x00")
        paths.append(str(p))
    return paths


def test_collect_frames_sorted(tmp_path):
    paths = touch_frames(tmp_path, 12)
    (tmp_path / "other.txt").write_text("x")
    assert collect_frames(str(tmp_path)) == paths


def test_collect_frames_missing(tmp_path):
    with pytest.raises(ValueError):
        collect_frames(str(tmp_path))


def test_ffmpeg_command(monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd)
        return subprocess.CompletedProcess(cmd, 0, "", "")

    monkeypatch.setattr(encoders.shutil, "which", lambda name: "/usr/bin/ffmpeg")
    monkeypatch.setattr(encoders.subprocess, "run", fake_run)
    encode_with_ffmpeg(input_pattern="fractal_%03d.ppm", output_file="fractal.gif", fps=25)
    assert calls == [["/usr/bin/ffmpeg", "-y", "-framerate", "25", "-i", "fractal_%03d.ppm", "fractal.gif"]]


def test_ffmpeg_failure_raises(monkeypatch):
    monkeypatch.setattr(encoders.shutil, "which", lambda name: "/usr/bin/ffmpeg")
    monkeypatch.setattr(encoders.subprocess, "run",
                        lambda cmd, **kw: subprocess.CompletedProcess(cmd, 1, "", "boom"))
    with pytest.raises(RuntimeError, match="status 1"):
        encode_with_ffmpeg(input_pattern="x_%03d.ppm", output_file="x.gif", fps=10)


def test_ffmpeg_missing_binary(monkeypatch):
    monkeypatch.setattr(encoders.shutil, "which", lambda name: None)
    with pytest.raises(RuntimeError, match="not found"):
        encode_with_ffmpeg(input_pattern="x_%03d.ppm", output_file="x.gif", fps=10)


def test_opencv_requires_mp4(tmp_path):
    pytest.importorskip("cv2")
    touch_frames(tmp_path, 2)
    with pytest.raises(ValueError):
        encoders.encode_with_opencv(input_dir=str(tmp_path), output_file="out.gif", fps=10)


def test_cleanup_frames(tmp_path):
    paths = touch_frames(tmp_path, 3)
    assert cleanup_frames(paths + [str(tmp_path / "gone.ppm")]) == 3
    assert list(tmp_path.iterdir()) == []
