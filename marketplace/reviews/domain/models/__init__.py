from .review import SellerReview


__all__ = ["SellerReview"]
