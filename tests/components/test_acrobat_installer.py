import zipfile
from pathlib import Path
from unittest.mock import MagicMock

from avd_installer.components.acrobat import acrobat_installer
from avd_installer.components.acrobat.acrobat_installer import AcrobatInstaller


def _fake_download(url, destination, *args, **kwargs):
    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)
    if destination.suffix == ".zip":
        with zipfile.ZipFile(destination, "w") as zf:
            zf.writestr("Adobe Acrobat/setup.exe", b"MZ")
            zf.writestr("Adobe Acrobat/Transforms/.keep", "")
    else:
        destination.write_bytes(b"MST")
    return destination


def test_acrobat_extracts_then_runs_setup_with_transform(
    mocker, tmp_path, app_settings, mock_logger
):
    mocker.patch(
        "avd_installer.common.file_utils.tempfile.gettempdir",
        return_value=str(tmp_path),
    )
    mock_download = mocker.patch.object(
        acrobat_installer, "download_file", side_effect=_fake_download
    )
    mock_run = mocker.patch.object(
        acrobat_installer, "run_installer", return_value=MagicMock(returncode=0)
    )
    installer = AcrobatInstaller(app_settings, mock_logger)

    assert installer.install() is True

    setup_dir = Path(app_settings.work_dir) / "Adobe Acrobat"
    transform = setup_dir / "Transforms" / "AcroPro.mst"
    assert transform.read_bytes() == b"MST"
    assert mock_download.call_count == 2
    assert mock_download.call_args_list[0].args[1] == tmp_path.resolve() / "Acrobat_DC_Web_x64_WWMUI.zip"

    args, kwargs = mock_run.call_args
    assert args[0] == setup_dir / "setup.exe"
    assert args[1] == f'/sAll /rs /msi EULA_ACCEPT=YES TRANSFORMS="{transform}"'
    assert kwargs["cwd"] == str(setup_dir)


def test_acrobat_task_lists_archive_and_transform(app_settings):
    task = AcrobatInstaller(app_settings).build_task()

    assert task.source_urls == [
        str(app_settings.acrobat.url),
        str(app_settings.acrobat.transform_url),
    ]
    assert task.local_file_name == "Acrobat_DC_Web_x64_WWMUI.zip"
