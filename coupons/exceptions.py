class CouponError(Exception):
    """A coupon cannot be applied. Never retried, reported back as a 4xx."""

    status_code = 400
    code = "coupon_error"
    default_message = "Coupon cannot be applied."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCoupon(CouponError):
    code = "invalid_coupon"
    default_message = "Invalid coupon code."


class CouponInactive(CouponError):
    code = "coupon_inactive"
    default_message = "This coupon is no longer active."


class CouponNotYetValid(CouponError):
    code = "coupon_not_yet_valid"
    default_message = "This coupon is not valid yet."


class CouponExpired(CouponError):
    code = "coupon_expired"
    default_message = "This coupon has expired."


class UsageLimitReached(CouponError):
    code = "usage_limit_reached"
    default_message = "This coupon has reached its usage limit."


class UserLimitReached(CouponError):
    code = "user_limit_reached"
    default_message = "You have already used this coupon the maximum number of times."


class MinimumPurchaseNotMet(CouponError):
    code = "minimum_purchase_not_met"
    default_message = "Minimum purchase amount not met."


class CouponNotApplicable(CouponError):
    code = "coupon_not_applicable"
    default_message = "This coupon does not apply to any item in your cart."
