"""
Dashboard shortcuts shown to each role.
"""
from typing import Dict, List

QuickAction = Dict[str, str]

ADMIN_ACTIONS: List[QuickAction] = [
    {
        "id": "manage-products",
        "title": "Manage Products",
        "description": "View and manage all products",
        "icon": "FiPackage",
        "link": "/admin/products",
        "color": "bg-blue-500",
    },
    {
        "id": "user-management",
        "title": "User Management",
        "description": "Manage users and permissions",
        "icon": "FiUsers",
        "link": "/admin/users",
        "color": "bg-green-500",
    },
    {
        "id": "order-management",
        "title": "Order Management",
        "description": "Track and manage orders",
        "icon": "FiShoppingCart",
        "link": "/admin/orders",
        "color": "bg-purple-500",
    },
    {
        "id": "analytics",
        "title": "Analytics",
        "description": "View detailed analytics",
        "icon": "FiBarChart",
        "link": "/admin/analytics",
        "color": "bg-orange-500",
    },
]

SELLER_ACTIONS: List[QuickAction] = [
    {
        "id": "add-product",
        "title": "Add New Product",
        "description": "List a new product for sale",
        "icon": "FiPlus",
        "link": "/seller/products/add",
        "color": "bg-green-500",
    },
    {
        "id": "manage-products",
        "title": "Manage Products",
        "description": "View and edit your products",
        "icon": "FiPackage",
        "link": "/seller/products",
        "color": "bg-blue-500",
    },
    {
        "id": "view-orders",
        "title": "View Orders",
        "description": "Manage your orders",
        "icon": "FiShoppingCart",
        "link": "/seller/orders",
        "color": "bg-purple-500",
    },
    {
        "id": "earnings",
        "title": "Earnings Report",
        "description": "View your earnings",
        "icon": "FiBarChart",
        "link": "/seller/earnings",
        "color": "bg-orange-500",
    },
]

BUYER_ACTIONS: List[QuickAction] = [
    {
        "id": "browse-products",
        "title": "Browse Products",
        "description": "Discover new tribal crafts",
        "icon": "FiPackage",
        "link": "/products",
        "color": "bg-blue-500",
    },
    {
        "id": "my-orders",
        "title": "My Orders",
        "description": "Track your orders",
        "icon": "FiShoppingCart",
        "link": "/orders",
        "color": "bg-green-500",
    },
    {
        "id": "wishlist",
        "title": "Wishlist",
        "description": "View saved items",
        "icon": "FiHeart",
        "link": "/wishlist",
        "color": "bg-red-500",
    },
    {
        "id": "profile",
        "title": "Profile Settings",
        "description": "Update your profile",
        "icon": "FiUser",
        "link": "/profile",
        "color": "bg-purple-500",
    },
]


def quick_actions_for(role: str) -> List[QuickAction]:
    """Shortcuts for ``role``; unknown roles get the buyer set."""
    if role == "admin":
        return ADMIN_ACTIONS
    if role == "seller":
        return SELLER_ACTIONS
    return BUYER_ACTIONS
