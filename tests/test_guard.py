"""Access rules: which paths need ROLE_USER."""

import pytest

from modules.auth.guard import ACCESS_RULES, path_matches, required_role
from modules.user.models import ROLE_USER


@pytest.mark.parametrize(
    "path,role",
    [
        ("/design", ROLE_USER),
        ("/design/", ROLE_USER),
        ("/orders", ROLE_USER),
        ("/orders/current", ROLE_USER),
        ("/", None),
        ("/login", None),
        ("/logout", None),
        ("/designer", None),
        ("/health", None),
    ],
)
def test_required_role(path, role):
    assert required_role(path) == role


def test_first_matching_rule_wins():
    rules = (("/admin/**", "ROLE_ADMIN"), ("/admin/public", None), ("/**", None))
    assert required_role("/admin/public", rules) == "ROLE_ADMIN"


def test_catch_all_matches_everything():
    assert ACCESS_RULES[-1] == ("/**", None)
    assert path_matches("/**", "/anything/at/all")
    assert not path_matches("/orders/**", "/ordersx")
