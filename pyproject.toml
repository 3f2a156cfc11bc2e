[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sproutkit"
version = "0.1.0"
description = "AES-OCB authenticated encryption, printable 128-bit keys, nonce framing and cellular link delay-queue simulation"
requires-python = ">=3.10"
dependencies = [
    "cryptography",
]
keywords = [
    "ocb",
    "aes",
    "aead",
    "authenticated-encryption",
    "nonce",
    "network-simulation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
sproutkit-encrypt = "sproutkit.encrypt_cmd:main"
sproutkit-decrypt = "sproutkit.decrypt_cmd:main"

[tool.hatch.build.targets.wheel]
packages = ["sproutkit"]

[tool.hatch.build.targets.sdist]
include = [
    "sproutkit",
    "tests",
    "pyproject.toml",
    "README.md",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
