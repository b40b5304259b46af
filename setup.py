# setup.py
from setuptools import setup, find_packages

setup(
    name="custodycal",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "python-dateutil",
        "PySide6",
        "matplotlib",
        "reportlab",
        "icalendar",
        "Flask",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-qt",
        ],
    },
    entry_points={
        "console_scripts": [
            "custodycal=custodycal.main:run_wizard",
            "custodycal-ui=custodycal.ui:main",
            "custodycal-server=custodycal.server:main",
        ],
    },
)
