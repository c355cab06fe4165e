from regbot.middlewares.api_middleware import ApiMiddleware, ACCESS_TOKEN_KEY

__all__ = ["ApiMiddleware", "ACCESS_TOKEN_KEY"]
