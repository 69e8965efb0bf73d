from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from conftest import mock_db
from marketplace.core.exceptions import InsufficientStockError, NotFoundError, RepositoryError
from marketplace.repositories import (
    BaseRepository,
    CartRepository,
    ChatRepository,
    CouponRepository,
    MessageRepository,
    OrderRepository,
    ProductRepository,
    ReviewRepository,
    UserRepository,
)


@pytest.fixture
def db():
    return mock_db()


class TestBaseRepository:
    def test_requires_collection_name(self, db):
        with pytest.raises(ValueError):
            BaseRepository(db)

    async def test_create_stamps_timestamps(self, db):
        repo = UserRepository(db)
        new_id = ObjectId()
        repo.collection.insert_one.return_value = MagicMock(inserted_id=new_id)

        created = await repo.create({"name": "Asha"})

        assert created["_id"] == new_id
        assert created["created_at"] == created["updated_at"]

    async def test_find_by_id_invalid_id_skips_query(self, db):
        repo = UserRepository(db)
        assert await repo.find_by_id("not-an-id") is None
        repo.collection.find_one.assert_not_called()

    async def test_find_all_pagination(self, db):
        repo = ProductRepository(db)
        cursor = repo.collection.find.return_value
        cursor.to_list.return_value = [{"_id": ObjectId()}, {"_id": ObjectId()}]
        repo.collection.count_documents.return_value = 25

        result = await repo.find_all({"is_active": True}, limit=10, skip=10)

        cursor.sort.assert_called_once_with([("created_at", -1)])
        cursor.skip.assert_called_once_with(10)
        cursor.limit.assert_called_once_with(10)
        assert result["pagination"] == {"total": 25, "page": 2, "limit": 10, "pages": 3}
        assert len(result["data"]) == 2

    async def test_update_by_id_sets_updated_at(self, db):
        repo = ProductRepository(db)
        oid = ObjectId()
        await repo.update_by_id(oid, {"price": 10})

        filter, update = repo.collection.find_one_and_update.call_args.args
        assert filter == {"_id": oid}
        assert update["$set"]["price"] == 10
        assert "updated_at" in update["$set"]

    async def test_update_by_id_raw_keeps_operators(self, db):
        repo = UserRepository(db)
        await repo.update_by_id(ObjectId(), {"$push": {"wishlist": "x"}}, raw=True)

        update = repo.collection.find_one_and_update.call_args.args[1]
        assert update["$push"] == {"wishlist": "x"}
        assert set(update["$set"]) == {"updated_at"}

    async def test_soft_delete_marks_inactive(self, db):
        repo = ProductRepository(db)
        await repo.soft_delete(ObjectId())
        update = repo.collection.find_one_and_update.call_args.args[1]
        assert update["$set"]["is_active"] is False

    async def test_driver_errors_are_wrapped(self, db):
        repo = UserRepository(db)
        repo.collection.count_documents.side_effect = PyMongoError("connection refused")

        with pytest.raises(RepositoryError) as exc_info:
            await repo.count()
        assert exc_info.value.message == "Error counting documents: connection refused"


class TestUserRepository:
    async def test_find_by_email_lowercases(self, db):
        repo = UserRepository(db)
        await repo.find_by_email("  Asha@Example.COM ")
        repo.collection.find_one.assert_awaited_once_with({"email": "asha@example.com"}, None)

    async def test_email_exists_excludes_self(self, db):
        repo = UserRepository(db)
        me = ObjectId()
        repo.collection.count_documents.return_value = 0

        assert await repo.email_exists("a@example.com", exclude_user_id=me) is False
        repo.collection.count_documents.assert_awaited_once_with(
            {"email": "a@example.com", "_id": {"$ne": me}}
        )

    async def test_add_to_wishlist_is_idempotent_update(self, db):
        repo = UserRepository(db)
        product_id = ObjectId()
        await repo.add_to_wishlist(ObjectId(), str(product_id))
        update = repo.collection.find_one_and_update.call_args.args[1]
        assert update["$addToSet"] == {"wishlist": product_id}

    async def test_mark_notification_read_reports_missing(self, db):
        repo = UserRepository(db)
        repo.collection.update_one.return_value = MagicMock(matched_count=0)
        assert await repo.mark_notification_read(ObjectId(), ObjectId()) is False
        assert await repo.mark_notification_read(ObjectId(), "bad-id") is False

    async def test_push_notification_requires_seller_profile(self, db):
        repo = UserRepository(db)
        seller_id = ObjectId()
        repo.collection.find_one_and_update.return_value = None

        assert await repo.push_notification(seller_id, {"type": "new_order"}) is None

        filter, update = repo.collection.find_one_and_update.call_args.args
        assert filter == {"_id": seller_id, "seller_info": {"$type": "object"}}
        assert update["$push"] == {"seller_info.notifications": {"type": "new_order"}}

    async def test_ensure_seller_info_only_fills_missing_profile(self, db):
        repo = UserRepository(db)
        user_id = ObjectId()
        repo.collection.update_one.return_value = MagicMock(modified_count=1)

        assert await repo.ensure_seller_info(user_id) is True

        filter, update = repo.collection.update_one.call_args.args
        assert filter == {"_id": user_id, "seller_info": None}
        assert update["$set"]["seller_info"]["verified"] is False
        assert update["$set"]["seller_info"]["notifications"] == []
        assert await repo.ensure_seller_info("bad-id") is False

    async def test_push_notification_wraps_driver_errors(self, db):
        repo = UserRepository(db)
        repo.collection.find_one_and_update.side_effect = PyMongoError("boom")
        with pytest.raises(RepositoryError):
            await repo.push_notification(ObjectId(), {"type": "new_order"})


class TestProductRepository:
    async def test_search_escapes_regex(self, db):
        repo = ProductRepository(db)
        await repo.search("a+b")
        filter = repo.collection.find.call_args.args[0]
        assert filter["is_active"] is True
        assert filter["$or"][0]["name"] == {"$regex": r"a\+b", "$options": "i"}

    async def test_update_stock_rejects_negative(self, db):
        repo = ProductRepository(db)
        repo.collection.find_one.return_value = {"_id": ObjectId(), "name": "Shawl", "stock": 2}

        with pytest.raises(InsufficientStockError):
            await repo.update_stock(ObjectId(), -3)
        repo.collection.find_one_and_update.assert_not_called()

    async def test_decrement_stock_is_conditional(self, db):
        repo = ProductRepository(db)
        oid = ObjectId()
        repo.collection.find_one_and_update.return_value = None

        assert await repo.decrement_stock_if_available(oid, 3) is None
        filter, update = repo.collection.find_one_and_update.call_args.args
        assert filter == {"_id": oid, "stock": {"$gte": 3}}
        assert update["$inc"] == {"stock": -3}

    async def test_find_by_ids_drops_invalid(self, db):
        repo = ProductRepository(db)
        valid = ObjectId()
        await repo.find_by_ids([str(valid), "junk"])
        filter = repo.collection.find.call_args.args[0]
        assert filter == {"_id": {"$in": [valid]}, "is_active": True}

    async def test_find_by_ids_all_invalid(self, db):
        repo = ProductRepository(db)
        assert await repo.find_by_ids(["junk"]) == []
        repo.collection.find.assert_not_called()

    async def test_stats_default_when_empty(self, db):
        repo = ProductRepository(db)
        stats = await repo.get_stats(ObjectId())
        assert stats["total_products"] == 0


class TestCartRepository:
    async def test_add_item_merges_existing_line(self, db):
        repo = CartRepository(db)
        product_id = ObjectId()
        repo.collection.find_one.return_value = {
            "_id": ObjectId(),
            "items": [{"product": product_id, "quantity": 2}],
        }

        await repo.add_item(ObjectId(), product_id, 3)

        update = repo.collection.find_one_and_update.call_args.args[1]
        assert update["$set"]["items"] == [{"product": product_id, "quantity": 5}]

    async def test_add_item_appends_new_line(self, db):
        repo = CartRepository(db)
        repo.collection.find_one.return_value = {"_id": ObjectId(), "items": []}
        product_id = ObjectId()

        await repo.add_item(ObjectId(), product_id, 1)

        items = repo.collection.find_one_and_update.call_args.args[1]["$set"]["items"]
        assert items[0]["product"] == product_id
        assert items[0]["quantity"] == 1
        assert "added_at" in items[0]

    async def test_update_quantity_missing_item(self, db):
        repo = CartRepository(db)
        repo.collection.find_one.return_value = {"_id": ObjectId(), "items": []}
        with pytest.raises(NotFoundError):
            await repo.update_quantity(ObjectId(), ObjectId(), 2)

    async def test_update_quantity_zero_removes(self, db):
        repo = CartRepository(db)
        product_id = ObjectId()
        repo.collection.find_one.return_value = {
            "_id": ObjectId(),
            "items": [{"product": product_id, "quantity": 2}],
        }

        await repo.update_quantity(ObjectId(), product_id, 0)

        update = repo.collection.find_one_and_update.call_args.args[1]
        assert update["$pull"] == {"items": {"product": product_id}}


class TestReviewRepository:
    async def test_rating_summary(self, db):
        repo = ReviewRepository(db)
        repo.collection.aggregate.return_value.to_list = AsyncMock(
            return_value=[{"_id": 5, "count": 2}, {"_id": 4, "count": 1}]
        )

        summary = await repo.get_product_rating(ObjectId())

        assert summary == {"average": 4.67, "total": 3, "distribution": {"5": 2, "4": 1}}

    async def test_rating_summary_without_reviews(self, db):
        repo = ReviewRepository(db)
        summary = await repo.get_product_rating(ObjectId())
        assert summary == {"average": 0, "total": 0, "distribution": {}}

    async def test_toggle_helpful_removes_existing_vote(self, db):
        repo = ReviewRepository(db)
        user_id = ObjectId()
        repo.collection.find_one.return_value = {"_id": ObjectId(), "is_active": True, "helpful": [{"user": user_id}]}

        await repo.toggle_helpful(ObjectId(), user_id)

        update = repo.collection.find_one_and_update.call_args.args[1]
        assert update["$pull"] == {"helpful": {"user": user_id}}

    async def test_toggle_helpful_ignores_deleted_review(self, db):
        repo = ReviewRepository(db)
        repo.collection.find_one.return_value = {"_id": ObjectId(), "is_active": False, "helpful": []}

        assert await repo.toggle_helpful(ObjectId(), ObjectId()) is None
        repo.collection.find_one_and_update.assert_not_called()


class TestCouponRepository:
    async def test_find_by_code_normalizes(self, db):
        repo = CouponRepository(db)
        await repo.find_by_code(" diwali10 ")
        repo.collection.find_one.assert_awaited_once_with({"code": "DIWALI10"}, None)

    async def test_record_usage_increments(self, db):
        repo = CouponRepository(db)
        await repo.record_usage(ObjectId(), ObjectId(), 1000, 100)
        update = repo.collection.find_one_and_update.call_args.args[1]
        assert update["$inc"] == {"used_count": 1}
        assert update["$push"]["used_by"]["discount_amount"] == 100


class TestChatRepository:
    async def test_find_between_matches_exact_participants(self, db):
        repo = ChatRepository(db)
        a, b = ObjectId(), ObjectId()
        await repo.find_between([a, b])
        filter = repo.collection.find_one.call_args.args[0]
        assert filter["participants"] == {"$all": [a, b], "$size": 2}
        assert filter["product"] is None

    def test_is_participant(self):
        a = ObjectId()
        assert ChatRepository.is_participant({"participants": [a]}, str(a))
        assert not ChatRepository.is_participant({"participants": [a]}, str(ObjectId()))


class TestMessageRepository:
    async def test_add_message_updates_last_message(self, db):
        repo = MessageRepository(db)
        chat_id, message_id = ObjectId(), ObjectId()
        repo.collection.insert_one.return_value = MagicMock(inserted_id=message_id)

        created = await repo.add_message({"chat": chat_id, "content": "Johar"})

        assert created["_id"] == message_id
        filter, update = db["chats"].find_one_and_update.call_args.args
        assert filter == {"_id": chat_id}
        assert update["$set"]["last_message"] == message_id

    async def test_add_message_wraps_chat_update_errors(self, db):
        repo = MessageRepository(db)
        repo.collection.insert_one.return_value = MagicMock(inserted_id=ObjectId())
        db["chats"].find_one_and_update.side_effect = PyMongoError("boom")

        with pytest.raises(RepositoryError):
            await repo.add_message({"chat": ObjectId(), "content": "Johar"})


class TestFinderHelpers:
    async def test_base_create_many_and_restore(self, db):
        repo = ProductRepository(db)
        ids = [ObjectId(), ObjectId()]
        repo.collection.insert_many.return_value = MagicMock(inserted_ids=ids)

        assert await repo.create_many([{"name": "a"}, {"name": "b"}]) == ids

        await repo.restore(ObjectId())
        update = repo.collection.find_one_and_update.call_args.args[1]
        assert update["$set"]["is_active"] is True

    async def test_user_finders(self, db):
        repo = UserRepository(db)

        await repo.find_by_phone("9876543210")
        repo.collection.find_one.assert_awaited_with({"phone": "9876543210"}, None)

        await repo.find_by_role("seller")
        assert repo.collection.find.call_args.args[0] == {"role": "seller"}

        await repo.find_active_users()
        assert repo.collection.find.call_args.args[0] == {"is_active": True}

        await repo.find_verified_sellers()
        assert repo.collection.find.call_args.args[0] == {
            "role": "seller",
            "seller_info.verified": True,
            "is_active": True,
        }

    async def test_verify_email_and_last_login(self, db):
        repo = UserRepository(db)

        await repo.verify_email(ObjectId())
        assert repo.collection.find_one_and_update.call_args.args[1]["$set"]["email_verified"] is True

        await repo.update_last_login(ObjectId())
        assert "last_login" in repo.collection.find_one_and_update.call_args.args[1]["$set"]

    async def test_product_finders(self, db):
        repo = ProductRepository(db)

        await repo.find_by_category("Pottery")
        assert repo.collection.find.call_args.args[0] == {"category": "Pottery", "is_active": True}

        await repo.find_by_price_range(100, 500)
        assert repo.collection.find.call_args.args[0]["price"] == {"$gte": 100, "$lte": 500}

        await repo.find_low_stock()
        assert repo.collection.find.call_args.args[0] == {"is_active": True, "stock": {"$lte": 10}}

        await repo.find_low_stock(threshold=2)
        assert repo.collection.find.call_args.args[0]["stock"] == {"$lte": 2}

    async def test_is_in_stock(self, db):
        repo = ProductRepository(db)

        repo.collection.find_one.return_value = {"_id": ObjectId(), "is_active": True, "stock": 3}
        assert await repo.is_in_stock(ObjectId(), 3) is True
        assert await repo.is_in_stock(ObjectId(), 4) is False

        repo.collection.find_one.return_value = {"_id": ObjectId(), "is_active": False, "stock": 3}
        assert await repo.is_in_stock(ObjectId()) is False

        repo.collection.find_one.return_value = None
        assert await repo.is_in_stock(ObjectId()) is False

    async def test_order_finders(self, db):
        repo = OrderRepository(db)
        seller_id = ObjectId()

        await repo.find_by_status("delivered")
        assert repo.collection.find.call_args.args[0] == {"status": "delivered"}

        await repo.find_by_order_number("TM123456ABCDE")
        repo.collection.find_one.assert_awaited_with({"order_number": "TM123456ABCDE"}, None)

        await repo.find_by_seller(seller_id, status="shipped")
        assert repo.collection.find.call_args.args[0] == {"items.seller": seller_id, "status": "shipped"}
