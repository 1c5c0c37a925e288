# setup.py
from setuptools import find_packages, setup

setup(
    name="plancarbon",
    version="0.1.0",
    description="Read the compute resources of Terraform plans for carbon estimation",
    python_requires=">=3.8",
    packages=find_packages(include=["plancarbon", "plancarbon.*"]),
    py_modules=["main"],
    include_package_data=True,
    package_data={"plancarbon": ["data/*.json"]},
    install_requires=["click", "requests", "rich", "python-dotenv"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "plancarbon=main:main",
        ]
    },
)
