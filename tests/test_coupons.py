from datetime import timedelta

import pytest
from bson import ObjectId

from marketplace.models.base import utcnow
from marketplace.services.coupons import calculate_discount, validate_coupon


def make_coupon(**extra):
    now = utcnow()
    coupon = {
        "_id": ObjectId(),
        "code": "TRIBAL10",
        "type": "percentage",
        "value": 10,
        "minimum_amount": 500,
        "maximum_discount": 200,
        "usage_limit": 5,
        "used_count": 0,
        "user_limit": 1,
        "used_by": [],
        "valid_from": now - timedelta(days=1),
        "valid_until": now + timedelta(days=1),
        "is_active": True,
    }
    coupon.update(extra)
    return coupon


@pytest.fixture
def user_id():
    return ObjectId()


def test_valid_coupon(user_id):
    assert validate_coupon(make_coupon(), user_id, 1000) == (True, None)


def test_inactive_coupon(user_id):
    assert validate_coupon(make_coupon(is_active=False), user_id, 1000) == (False, "Coupon is not active")


def test_expired_coupon(user_id):
    coupon = make_coupon(valid_until=utcnow() - timedelta(hours=1))
    assert validate_coupon(coupon, user_id, 1000) == (False, "Coupon has expired or not yet valid")


def test_not_yet_valid_coupon(user_id):
    coupon = make_coupon(valid_from=utcnow() + timedelta(hours=1))
    valid, reason = validate_coupon(coupon, user_id, 1000)
    assert not valid
    assert reason == "Coupon has expired or not yet valid"


def test_usage_limit_reached(user_id):
    coupon = make_coupon(used_count=5)
    assert validate_coupon(coupon, user_id, 1000) == (False, "Coupon usage limit exceeded")


def test_minimum_amount(user_id):
    valid, reason = validate_coupon(make_coupon(), user_id, 499)
    assert not valid
    assert reason == "Minimum order amount should be ₹500"


def test_per_user_limit(user_id):
    coupon = make_coupon(used_by=[{"user": user_id, "order_amount": 800, "discount_amount": 80}])
    assert validate_coupon(coupon, str(user_id), 1000) == (False, "You have already used this coupon")


def test_other_users_usage_does_not_count(user_id):
    coupon = make_coupon(used_by=[{"user": ObjectId()}])
    assert validate_coupon(coupon, user_id, 1000) == (True, None)


def test_checks_run_in_order(user_id):
    # Inactive wins over every later failure
    coupon = make_coupon(is_active=False, used_count=5, valid_until=utcnow() - timedelta(days=2))
    assert validate_coupon(coupon, user_id, 0)[1] == "Coupon is not active"


def test_percentage_discount():
    assert calculate_discount(make_coupon(), 1000) == 100


def test_percentage_discount_is_capped():
    assert calculate_discount(make_coupon(), 5000) == 200


def test_percentage_without_cap():
    assert calculate_discount(make_coupon(maximum_discount=None), 5000) == 500


def test_fixed_discount_never_exceeds_amount():
    coupon = make_coupon(type="fixed", value=300)
    assert calculate_discount(coupon, 1000) == 300
    assert calculate_discount(coupon, 250) == 250
