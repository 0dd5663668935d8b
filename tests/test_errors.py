import pytest

from xfstool.xfs.errors import DiskCreateError, DiskOpenError, XfsError


def test_open_error_message():
    error = DiskOpenError()
    assert str(error) == "Unable to open disk file"
    assert error.code == 1


def test_create_error_message():
    error = DiskCreateError()
    assert str(error) == "Failed to create disk file"
    assert error.code == 2


def test_custom_message_kept():
    assert str(DiskOpenError("cannot read x")) == "cannot read x"


@pytest.mark.parametrize("cls", [DiskOpenError, DiskCreateError])
def test_caught_as_base(cls):
    with pytest.raises(XfsError) as info:
        raise cls()
    assert info.value.code == cls.code