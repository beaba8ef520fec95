"""
Setup file for the InstanceHasTag conformity rule.
Allows installation in development mode: pip install -e .
"""
from setuptools import setup, find_namespace_packages

setup(
    name="instance-tag-conformity",
    version="1.0.0",
    description="Conformity rule reporting EC2 instances missing required tags",
    packages=find_namespace_packages(include=["conformity", "utils"]),
    py_modules=["lambda_handler"],
    python_requires=">=3.9",
    install_requires=[
        "boto3",
        "botocore",
    ],
    extras_require={
        "dev": [
            "pytest",
            "pytest-cov",
            "pytest-mock",
        ],
    },
)
