"""Setup file for shoplist package."""
from setuptools import setup, find_packages

setup(
    name="shoplist",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "loguru>=0.7",
        "python-dotenv>=1.0",
        "openai>=1.40",
        "SQLAlchemy>=2.0",
        "streamlit>=1.40",
        "numpy>=1.26",
        "sounddevice>=0.4.6",
    ],
    extras_require={
        "test": [
            "pytest>=8.1.1",
            "pytest-asyncio>=0.23",
            "httpx>=0.25",
        ],
    },
    python_requires=">=3.11",
)
