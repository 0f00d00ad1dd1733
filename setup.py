from setuptools import setup, find_packages

setup(
    name="envi",
    version="0.1.0",
    description="Decode environment variables into typed, nested dataclass configs",
    packages=find_packages(include=["envi", "envi.*"]),
    install_requires=[
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    python_requires=">=3.10",
)
