# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="bundletree",
    version="1.0.0",
    description="Lazily expanded tree views over asset bundles and asset documents",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["bundletree", "bundletree.*"]),
    python_requires=">=3.8",
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'bundletree=bundletree.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
