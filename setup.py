"""Setup script for the gridkiosk multi-display grid content player."""

from pathlib import Path

from setuptools import find_packages, setup

# Read the README file
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Read requirements, separating test dependencies
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
test_requirements = []

if requirements_file.exists():
    for line in requirements_file.read_text().strip().split("\n"):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "pytest" in line:
            test_requirements.append(line)
        else:
            requirements.append(line)

setup(
    name="gridkiosk",
    version="1.0.0",
    description="Multi-display grid content player for kiosk and digital signage deployments",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="gridkiosk Team",
    # Package configuration
    packages=find_packages(include=["gridkiosk", "gridkiosk.*"]),
    include_package_data=True,
    # Dependencies
    install_requires=requirements,
    extras_require={
        "test": test_requirements,
        "dev": test_requirements
        + [
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: X11 Applications",
        "Environment :: Web Environment",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Graphics :: Presentation",
        "Framework :: AsyncIO",
    ],
    keywords="kiosk digital-signage multi-monitor grid-layout chromium fullscreen async",
    entry_points={
        "console_scripts": [
            "gridkiosk=gridkiosk.__main__:main",
        ],
    },
    package_data={
        "gridkiosk": [
            "web/static/*.js",
        ],
    },
    zip_safe=False,
    platforms=["linux"],
)
