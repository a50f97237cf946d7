from .review_serializers import ReviewCreateSerializer, SellerReviewSerializer


__all__ = ["ReviewCreateSerializer", "SellerReviewSerializer"]
