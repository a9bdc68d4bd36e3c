import pytest

from app.viewmodels.photo_vm import LIKED_GLYPH, UNLIKED_GLYPH, PhotoVM
from conftest import make_photo


@pytest.mark.parametrize(
    "liked,glyph,tip", [(True, LIKED_GLYPH, "Unlike"), (False, UNLIKED_GLYPH, "Like")]
)
def test_like_presentation(liked, glyph, tip):
    vm = PhotoVM(make_photo(1), is_liked=liked)

    assert vm.like_glyph == glyph
    assert vm.like_tooltip == tip


def test_tooltip_falls_back_to_owner():
    assert PhotoVM(make_photo(1, alt_text="")).tooltip == "Owner 1"
    assert PhotoVM(make_photo(1)).tooltip == "photo 1"
    assert PhotoVM(make_photo(1)).title == "Owner 1"


def test_id_mirrors_photo():
    assert PhotoVM(make_photo(7)).id == "p7"
