from ninja_extra import api_controller, route
from ninja_jwt.authentication import JWTAuth

from accounts import schema
from accounts.models import FelicityUser
from common.controllers import UserAwareController


@api_controller("/account", auth=JWTAuth(), tags=["Account"])
class AccountController(UserAwareController):
    @route.get("/me", response=schema.FelicityUserSchema, url_name="me")
    def me(self) -> FelicityUser:
        """Return the authenticated user's profile, including role and participant type."""
        return self.user()
