from setuptools import setup, find_packages

setup(
    name="fcm-sdk",
    version="0.1.0",
    description="Python SDK for the Firebase Cloud Messaging HTTP send API",
    author="FCM SDK Team",
    packages=find_packages(exclude=["tests", "tests.*", "examples"]),
    install_requires=[
        "httpx>=0.25.1",
        "pydantic>=2.0",
        "structlog>=23.1",
        "tenacity>=8.2",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.21",
        ],
    },
    python_requires=">=3.10",
)
