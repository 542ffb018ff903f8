from setuptools import setup, find_packages

setup(
    name="backuptool",
    version="0.1.0",
    description="backuptool backs up files and directories as tar archives encrypted with gpg, and restores them - temporary files are always cleaned up.",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=["pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "backuptool=backuptool.main:main",
        ],
    },
    python_requires=">=3.8",
)
