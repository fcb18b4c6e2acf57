from setuptools import setup, find_packages

setup(
    name="vault-token-helper",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "vault-token-helper=vault_token_helper.cli:run",
        ],
    },
    description="A Vault token helper that stores tokens in a SQLite database.",
)
