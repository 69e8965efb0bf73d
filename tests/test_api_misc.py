from datetime import timedelta

from bson import ObjectId

from conftest import auth_headers, make_product, make_user, page_of
from marketplace.models.base import utcnow


def notification(is_read=False, minutes_ago=0):
    return {
        "_id": ObjectId(),
        "type": "new_order",
        "message": "You have a new order TM000001AAAAA.",
        "is_read": is_read,
        "created_at": utcnow() - timedelta(minutes=minutes_ago),
    }


class TestNotifications:
    def test_newest_first_with_unread_count(self, client, repos, seller):
        older, newer = notification(is_read=True, minutes_ago=30), notification()
        seller["seller_info"]["notifications"] = [older, newer]
        repos.users.find_by_id.return_value = seller

        response = client.get("/api/notifications", headers=auth_headers(seller))

        assert response.status_code == 200
        data = response.json()
        assert [n["_id"] for n in data["notifications"]] == [str(newer["_id"]), str(older["_id"])]
        assert data["unread_count"] == 1

    def test_buyers_have_no_inbox(self, client, repos, buyer):
        assert client.get("/api/notifications", headers=auth_headers(buyer)).status_code == 403

    def test_mark_one_read(self, client, repos, seller):
        repos.users.mark_notification_read.return_value = True
        notification_id = ObjectId()

        response = client.put(f"/api/notifications/{notification_id}/read", headers=auth_headers(seller))

        assert response.status_code == 200
        repos.users.mark_notification_read.assert_awaited_once_with(str(seller["_id"]), str(notification_id))

    def test_mark_missing_notification(self, client, repos, seller):
        repos.users.mark_notification_read.return_value = False
        response = client.put(f"/api/notifications/{ObjectId()}/read", headers=auth_headers(seller))
        assert response.status_code == 404
        assert response.json()["message"] == "Notification not found"

    def test_read_all_is_not_treated_as_an_id(self, client, repos, seller):
        seller["seller_info"]["notifications"] = [notification()]
        repos.users.find_by_id.return_value = seller

        response = client.put("/api/notifications/read-all", headers=auth_headers(seller))

        assert response.status_code == 200
        repos.users.mark_all_notifications_read.assert_awaited_once_with(str(seller["_id"]))


class TestQuickActionsAndCategories:
    def test_actions_follow_role(self, client, repos, admin, seller, buyer):
        ids = {}
        for user in (admin, seller, buyer):
            response = client.get("/api/quick-actions", headers=auth_headers(user))
            assert response.status_code == 200
            ids[user["role"]] = [a["id"] for a in response.json()["quick_actions"]]

        assert "user-management" in ids["admin"]
        assert "add-product" in ids["seller"]
        assert "wishlist" in ids["buyer"]

    def test_quick_actions_need_auth(self, client, repos):
        assert client.get("/api/quick-actions").status_code == 401

    def test_static_categories(self, client):
        response = client.get("/api/categories")
        assert response.status_code == 200
        assert [c["slug"] for c in response.json()["categories"]] == ["jewelry", "textiles", "pottery", "handicrafts"]


class TestPayments:
    def order_for(self, user, **extra):
        order = {
            "_id": ObjectId(),
            "order_number": "TM111111ZZZZZ",
            "user": user["_id"],
            "status": "pending",
            "payment_method": "upi",
            "payment_info": {"method": "upi", "status": "pending"},
        }
        order.update(extra)
        return order

    def test_payment_confirms_pending_order(self, client, repos, buyer):
        order = self.order_for(buyer)
        repos.orders.find_by_id.return_value = order
        repos.orders.update_by_id.return_value = {**order, "status": "confirmed"}

        response = client.post("/api/payments/create", json={"order_id": str(order["_id"])}, headers=auth_headers(buyer))

        assert response.status_code == 200
        assert response.json()["payment_id"].startswith("pay_")
        _, update = repos.orders.update_by_id.await_args.args
        assert update["$set"]["status"] == "confirmed"
        assert update["$set"]["payment_info.status"] == "completed"
        assert update["$push"]["status_history"]["reason"] == "Payment received"

    def test_cod_orders_are_refused(self, client, repos, buyer):
        repos.orders.find_by_id.return_value = self.order_for(buyer, payment_method="cod")

        response = client.post("/api/payments/create", json={"order_id": str(ObjectId())}, headers=auth_headers(buyer))

        assert response.status_code == 400
        assert response.json()["message"] == "Cash on delivery orders are paid on delivery"

    def test_cannot_pay_for_someone_else(self, client, repos, buyer):
        repos.orders.find_by_id.return_value = self.order_for(make_user())
        response = client.post("/api/payments/create", json={"order_id": str(ObjectId())}, headers=auth_headers(buyer))
        assert response.status_code == 403

    def test_cancelled_order(self, client, repos, buyer):
        repos.orders.find_by_id.return_value = self.order_for(buyer, status="cancelled")
        response = client.post("/api/payments/create", json={"order_id": str(ObjectId())}, headers=auth_headers(buyer))
        assert response.status_code == 400


class TestReviews:
    def test_list_by_product(self, client, repos):
        product_id = ObjectId()
        repos.reviews.find_all.return_value = page_of([])

        response = client.get("/api/reviews", params={"product": str(product_id)})

        assert response.status_code == 200
        assert repos.reviews.find_all.await_args.args[0] == {"is_active": True, "product": product_id}

    def test_helpful_toggle(self, client, repos, buyer):
        repos.reviews.toggle_helpful.return_value = {
            "_id": ObjectId(),
            "is_active": True,
            "helpful": [{"user": buyer["_id"]}],
        }

        response = client.post(f"/api/reviews/{ObjectId()}/helpful", headers=auth_headers(buyer))

        assert response.status_code == 200
        assert response.json() == {"success": True, "helpful_count": 1, "marked_helpful": True}

    def test_helpful_on_deleted_review(self, client, repos, buyer):
        repos.reviews.toggle_helpful.return_value = None

        response = client.post(f"/api/reviews/{ObjectId()}/helpful", headers=auth_headers(buyer))

        assert response.status_code == 404
        assert response.json()["message"] == "Review not found"

    def test_only_author_or_admin_deletes(self, client, repos, buyer):
        repos.reviews.find_by_id.return_value = {"_id": ObjectId(), "user": ObjectId(), "is_active": True}
        response = client.delete(f"/api/reviews/{ObjectId()}", headers=auth_headers(buyer))
        assert response.status_code == 403

    def test_delete_recomputes_rating(self, client, repos, buyer):
        review = {"_id": ObjectId(), "user": buyer["_id"], "product": ObjectId(), "is_active": True}
        repos.reviews.find_by_id.return_value = review
        repos.reviews.get_product_rating.return_value = {"average": 0, "total": 0, "distribution": {}}

        response = client.delete(f"/api/reviews/{review['_id']}", headers=auth_headers(buyer))

        assert response.status_code == 200
        repos.reviews.soft_delete.assert_awaited_once()
        repos.products.set_rating.assert_awaited_once_with(review["product"], 0, 0)


class TestCoupons:
    def active_coupon(self, **extra):
        now = utcnow()
        coupon = {
            "_id": ObjectId(),
            "code": "TRIBAL10",
            "type": "percentage",
            "value": 10,
            "minimum_amount": 500,
            "maximum_discount": 150,
            "used_count": 0,
            "user_limit": 1,
            "used_by": [],
            "valid_from": now - timedelta(days=1),
            "valid_until": now + timedelta(days=1),
            "is_active": True,
        }
        coupon.update(extra)
        return coupon

    def test_validate_applies_discount(self, client, repos, buyer):
        repos.coupons.find_by_code.return_value = self.active_coupon()

        response = client.post(
            "/api/coupons/validate", json={"code": "tribal10", "cart_amount": 2000}, headers=auth_headers(buyer)
        )

        assert response.status_code == 200
        assert response.json()["valid"] is True
        assert response.json()["discount"] == 150

    def test_validate_reports_reason_with_200(self, client, repos, buyer):
        repos.coupons.find_by_code.return_value = self.active_coupon()

        response = client.post(
            "/api/coupons/validate", json={"code": "TRIBAL10", "cart_amount": 100}, headers=auth_headers(buyer)
        )

        assert response.status_code == 200
        assert response.json()["valid"] is False
        assert response.json()["message"] == "Minimum order amount should be ₹500"

    def test_unknown_code(self, client, repos, buyer):
        repos.coupons.find_by_code.return_value = None
        response = client.post(
            "/api/coupons/validate", json={"code": "NOPE", "cart_amount": 100}, headers=auth_headers(buyer)
        )
        assert response.json()["message"] == "Invalid coupon code"

    def test_admin_creates_coupon(self, client, repos, admin):
        repos.coupons.find_by_code.return_value = None
        repos.coupons.create.side_effect = lambda doc: {**doc, "_id": ObjectId()}
        now = utcnow()

        response = client.post(
            "/api/coupons",
            json={
                "code": "diwali20",
                "description": "Festive offer",
                "type": "percentage",
                "value": 20,
                "valid_from": now.isoformat(),
                "valid_until": (now + timedelta(days=7)).isoformat(),
            },
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        coupon = response.json()["coupon"]
        assert coupon["code"] == "DIWALI20"
        assert coupon["created_by"] == str(admin["_id"])

    def test_coupon_window_must_be_ordered(self, client, repos, admin):
        now = utcnow()
        response = client.post(
            "/api/coupons",
            json={
                "code": "BACKWARDS",
                "description": "Broken",
                "type": "fixed",
                "value": 50,
                "valid_from": now.isoformat(),
                "valid_until": (now - timedelta(days=1)).isoformat(),
            },
            headers=auth_headers(admin),
        )
        assert response.status_code == 422

    def test_buyers_cannot_create_coupons(self, client, repos, buyer):
        now = utcnow()
        response = client.post(
            "/api/coupons",
            json={
                "code": "FREEBIE",
                "description": "Not allowed",
                "type": "fixed",
                "value": 50,
                "valid_from": now.isoformat(),
                "valid_until": (now + timedelta(days=1)).isoformat(),
            },
            headers=auth_headers(buyer),
        )
        assert response.status_code == 403
        repos.coupons.create.assert_not_called()


class TestArtisans:
    def test_list_with_product_counts(self, client, repos):
        artisan = make_user("seller", verified=True, phone="9876543210")
        repos.users.find_verified_sellers.return_value = page_of([artisan])
        repos.products.count.return_value = 4

        response = client.get("/api/artisans")

        assert response.status_code == 200
        profile = response.json()["artisans"][0]
        assert profile["product_count"] == 4
        assert "email" not in profile
        assert "phone" not in profile
        assert "notifications" not in profile["seller_info"]

    def test_unverified_seller_is_not_an_artisan(self, client, repos):
        repos.users.find_by_id.return_value = make_user("seller", verified=False)
        response = client.get(f"/api/artisans/{ObjectId()}")
        assert response.status_code == 404

    def test_artisan_with_products(self, client, repos):
        artisan = make_user("seller", verified=True)
        repos.users.find_by_id.return_value = artisan
        repos.products.find_active_by_seller.return_value = page_of([make_product(seller_id=artisan["_id"])])

        response = client.get(f"/api/artisans/{artisan['_id']}")

        assert response.status_code == 200
        assert len(response.json()["products"]) == 1
