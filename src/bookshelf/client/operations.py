"""GraphQL documents sent by the gateway client."""

BOOK_FIELDS = """
    _id
    id
    title
    author
    year
    genre
    publisher
    createdAt
    updatedAt
"""

BOOK_LIST_QUERY = f"""
query GetBooks {{
  bookList {{{BOOK_FIELDS}}}
}}
"""

GET_BOOK_QUERY = f"""
query GetBook($id: ID!) {{
  book(id: $id) {{{BOOK_FIELDS}}}
}}
"""

SEARCH_BOOKS_QUERY = f"""
query SearchBooks($query: String!) {{
  bookSearch(query: $query) {{{BOOK_FIELDS}}}
}}
"""

CREATE_BOOK_MUTATION = f"""
mutation CreateBook($input: BookInput!) {{
  bookCreate(input: $input) {{{BOOK_FIELDS}}}
}}
"""

UPDATE_BOOK_MUTATION = f"""
mutation UpdateBook($id: ID!, $input: BookInput!) {{
  bookUpdate(id: $id, input: $input) {{{BOOK_FIELDS}}}
}}
"""

DELETE_BOOK_MUTATION = f"""
mutation DeleteBook($id: ID!) {{
  bookDelete(id: $id) {{{BOOK_FIELDS}}}
}}
"""
