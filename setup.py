# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="notegraph4ai",
    version="0.1.0",
    description="Compose a note, its backlinks and forward links into a single LLM-ready prompt",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["notegraph4ai*"]),
    package_data={"notegraph4ai.interface.locales": ["*.json"]},
    python_requires=">=3.9",
    install_requires=[
        "tiktoken",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'notegraph4ai=notegraph4ai.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
