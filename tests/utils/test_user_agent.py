import platform

from restrequest._utils import generate_user_agent


class TestGenerateUserAgent:
    def test_prefixes_product_info(self) -> None:
        user_agent = generate_user_agent("myapp/1.0")

        assert user_agent.startswith("myapp/1.0 restrequest/")
        assert f"Python/{platform.python_version()}" in user_agent
        assert platform.machine() in user_agent
