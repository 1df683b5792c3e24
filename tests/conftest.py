import pathlib

import pytest

from odoo_xmlrpc import LoginGuard, RPCProtocol

from . import mock_odoo_server


@pytest.fixture(scope='function')
def connect_params(httpserver, odoo_xml_rpc_handler):
    # use odoo_xml_rpc_handler so it is set up
    return {
        'host': httpserver.host,
        'port': httpserver.port,
        'protocol': RPCProtocol.HTTP,
    }


@pytest.fixture(scope='function')
def odoo_xml_rpc_handler(httpserver):
    """Setup the http server for Odoo XML-RPC"""
    handler = mock_odoo_server.default_rpc_handler()
    for service in mock_odoo_server.SERVICES:
        httpserver.expect_request("/xmlrpc/" + service, method="POST").respond_with_handler(
            handler
        )
    return handler


@pytest.fixture(scope='function')
def odoo_session(connect_params):
    from odoo_xmlrpc import Session

    session = Session(
        connect_params['host'],
        connect_params['port'],
        'odoo',
        'admin',
        'admin',
        protocol=connect_params['protocol'],
        guard=LoginGuard(),
    )
    session.start_session()
    return session


# CONFIGURE PYTEST


def pytest_configure(config):
    config.addinivalue_line("markers", "runbot: integration tests on a live server")


def pytest_collection_modifyitems(config, items):
    # If a test is in a subdirectory, add marker which is the directory name
    # https://stackoverflow.com/questions/57031403/pytest-marks-mark-entire-directory-package
    # To mark a file, you can use pytestmark = pytest.mark.my_mark
    rootdir = pathlib.Path(config.rootdir)
    for item in items:
        rel_path = pathlib.Path(item.fspath).relative_to(rootdir)
        mark_name = next((part for part in rel_path.parts if not part.startswith('test')), '')
        if mark_name:
            mark = getattr(pytest.mark, mark_name)
            item.add_marker(mark)
