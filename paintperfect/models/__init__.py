# Models package for PaintPerfect

from .enums import PriceType, RequestStatus, Role, STATUS_FLOW
from .profile import Profile
from .catalog import Category, Pricing
from .design import PaintingDesign
from .cart import CartItem
from .request import JobUpdate, PaintingRequest, VendorAssignment

__all__ = [
    "PriceType",
    "RequestStatus",
    "Role",
    "STATUS_FLOW",
    "Profile",
    "Category",
    "Pricing",
    "PaintingDesign",
    "CartItem",
    "PaintingRequest",
    "JobUpdate",
    "VendorAssignment",
]
