import pathlib

import setuptools

# The directory containing this file
HERE = pathlib.Path(__file__).parent
README = HERE / "README.md"


setuptools.setup(
    name="odoo-xmlrpc",
    version="0.1",
    description="""XML-RPC session client for Odoo""",
    keywords="odoo rpc xmlrpc",
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    long_description=README.read_text(),
    long_description_content_type='text/markdown',
    # https://pypi.org/pypi?%3Aaction=list_classifiers
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Framework :: Odoo",
    ],
    python_requires=">=3.7",
    install_requires=[
        'packaging',
        'requests',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-httpserver',
            'werkzeug',
        ],
    },
)
