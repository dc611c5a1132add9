from setuptools import setup, find_packages

setup(
    name="complink",
    version="1.0.0",
    description="complink - Component file binding, sync and backup toolkit",
    author="Your Name",
    packages=find_packages(include=["complink", "complink.*"]),
    include_package_data=True,
    install_requires=[
        # Core data modeling and validation
        "pydantic>=2.0.0",

        # Environment variables
        "python-dotenv>=1.0.0",

        # CLI and rich output
        "typer>=0.9.0",
        "rich>=13.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "complink = complink.cli:main",
        ],
    },
    python_requires=">=3.10",
    package_dir={"": "."},
)
