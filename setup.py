import setuptools

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setuptools.setup(
    name="hookbridge",
    version="0.1.0",
    author="wangguanran",
    author_email="elvans.wang@gmail.com",
    description="Pre and post operation hooks for repository commands.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(include=["hookbridge", "hookbridge.*"]),
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.10',
    install_requires=[
        'GitPython',
        'configupdater',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'hookbridge = hookbridge.__main__:main',
        ],
    },
)
