import logging
import os

import pytest

import odoo_xmlrpc


@pytest.fixture(scope='session')
def connect_params():
    # the live server is read from the environment
    odoo_url = os.environ.get("ODOO_URL")
    if not odoo_url:
        pytest.skip("ODOO_URL is not set, ex: http://admin@localhost:8069/odoo")
    logging.info("Using odoo server %s", odoo_url)

    return {
        'url': odoo_url,
    }


@pytest.fixture(scope='session')
def odoo_session(connect_params):
    return odoo_xmlrpc.connect(**connect_params)
