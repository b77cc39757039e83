import setuptools

try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = "Package and deploy NPL sources to a hosted application"

setuptools.setup(
    name="npl-deploy",
    version="0.1.0",
    description="Package and deploy NPL sources to a hosted application",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=setuptools.find_packages(where="src", include=["npl_deploy", "npl_deploy.*"]),
    install_requires=[
        "httpx",
        "pydantic>=2",
        "python-dotenv",
        "questionary",
        "rich",
        "tomli; python_version < '3.11'",
        "typer",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "npl-deploy=npl_deploy.cli.main:app",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
