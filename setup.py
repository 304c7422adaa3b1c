"""
Setup script for reformat.

ReFormat restructures learning material for a learner's cognitive
accessibility profile. It serves three roles:

1. Sorting Ceremony - a short quiz that recommends a learner profile
2. Adaptive Content - one document as reader, slides, audio, practice,
   mind map and flashcards
3. Saved Profiles - named presentation settings reused across sessions

The 'reformat' command is the entry point.
"""

from setuptools import find_packages, setup

setup(
    name="reformat",
    version="1.0.0",
    description="Adaptive restructuring of learning material for neurodivergent learners",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="ReFormat",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Generation
        "google-generativeai>=0.5.0",
        # Audio
        "numpy>=1.24.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "reformat=reformat.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning accessibility dyslexia adhd education cli",
)
