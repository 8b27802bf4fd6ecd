from setuptools import setup, find_packages

setup(
    name="uavpilot",
    version="0.1.0",
    description="uavpilot - Fixed-wing autopilot core with attitude stabilization and waypoint navigation",
    author="uavpilot developers",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    py_modules=["config", "main"],
    python_requires=">=3.10",
    install_requires=[
        "pyyaml>=6.0",
        "structlog>=23.1.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.3.0",
            "pytest-asyncio>=0.21.0",
            "pyproj>=3.5.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "uavpilot=main:main",
        ],
    },
)
