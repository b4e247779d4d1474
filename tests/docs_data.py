"""Documentation trees shared by the test modules."""

import json


def parameters_block(rows: list[tuple[str, str, str]]) -> str:
    """Render rows of (name, type, description) as a docs parameters block."""
    data = {"h-0": "Name", "h-1": "Type", "h-2": "Description"}
    for index, row in enumerate(rows):
        for col, value in enumerate(row):
            data[f"{index}-{col}"] = value
    block = {"data": data, "cols": 3, "rows": len(rows)}
    return "[block:parameters]\n" + json.dumps(block, indent=2) + "\n[/block]"


CUSTOMER_ROWS = [
    ("`id`", "string", "ID of the Customer object. String starting with **cus_**."),
    ("`status`", "string", "Status of the customer. One of the following:\n- **active**\n- **closed**"),
    ("`addresses`", "array of objects", "Addresses of the customer. See [Address Object](ref:address-object)."),
    ("`metadata`", "object", "A JSON object defined by the client."),
    ("`default_payment_method`", "object", "Contains the following fields:\n* `id`\n* `type`"),
]

ADDRESS_ROWS = [
    ("`line_1`", "string", "First line of the address."),
    ("`country`", "string", "Two-letter ISO 3166-1 ALPHA-2 code for the country."),
]

CUSTOMER_ERRORS_BODY = (
    "The following errors can be returned:\n\n"
    "**ERROR_GET_CUSTOMER**\n"
    "The request tried to retrieve a customer, but the customer was not found.\n"
    "**ERROR_CREATE_CUSTOMER**\n"
    "The request tried to create a customer, but the request failed.\n"
)


def customer_docs_data() -> list[dict]:
    return [
        {
            "title": "Customer Object - Collect",
            "slug": "customer-object",
            "type": "basic",
            "excerpt": "Describes the fields of a customer.",
            "body": "A customer of the merchant.\n\n" + parameters_block(CUSTOMER_ROWS),
            "children": [
                {
                    "title": "Customer Errors",
                    "slug": "customer-errors",
                    "type": "basic",
                    "body": CUSTOMER_ERRORS_BODY,
                },
                {
                    "title": "Create Customer",
                    "slug": "create-customer",
                    "type": "endpoint",
                    "excerpt": "Create a customer profile.",
                    "api": {
                        "method": "post",
                        "url": "/v1/customers",
                        "params": [
                            {"name": "name", "type": "string", "in": "body", "required": True, "desc": "Name of the customer."},
                            {"name": "email", "type": "string", "in": "body", "required": False, "desc": "Email address."},
                            {"name": "access_key", "type": "string", "in": "header", "required": True, "desc": "Access key."},
                            {"name": "Content-Type", "type": "string", "in": "header", "required": True, "desc": ""},
                        ],
                    },
                },
                {
                    "title": "Retrieve Customer",
                    "slug": "retrieve-customer",
                    "type": "endpoint",
                    "api": {
                        "method": "get",
                        "url": "/v1/customers/:customer",
                        "params": [
                            {"name": "customer", "type": "string", "in": "path", "required": False,
                             "desc": "ID of the customer. String starting with **cus_**."},
                        ],
                    },
                },
                {
                    "title": "List Customers",
                    "slug": "list-customers",
                    "type": "endpoint",
                    "api": {
                        "method": "get",
                        "url": "/v1/customers?limit=10",
                        "params": [
                            {"name": "limit", "type": "integer", "in": "query", "required": False, "desc": "Page size."},
                            {"name": "starting_after", "type": "string", "in": "query", "required": False, "desc": ""},
                        ],
                    },
                },
                {
                    "title": "Customer Sequence",
                    "slug": "customer-sequence",
                    "type": "basic",
                    "body": "How customers flow through the system.",
                },
            ],
        },
        {
            "title": "Address Object",
            "slug": "address-object",
            "type": "basic",
            "body": parameters_block(ADDRESS_ROWS),
        },
        {
            "title": "Webhook - Customer Created",
            "slug": "webhook-customer-created",
            "type": "basic",
            "body": "",
        },
        {
            "title": "Overview",
            "slug": "overview",
            "type": "basic",
            "body": "Welcome.",
        },
        {
            "title": "Changelog",
            "slug": "changelog",
            "type": "link",
        },
    ]
