async def test_deposit_loss_and_rejected_withdrawal(player_client, games):
    deposit = await player_client.post('/api/transactions', json={
        'amount': 1000, 'type': 'deposit', 'method': 'bKash',
    })
    assert deposit.status_code == 201
    body = deposit.json()
    assert body['type'] == 'deposit'
    assert body['amount'] == 1000
    assert body['status'] == 'completed'
    assert (await player_client.get('/api/user')).json()['balance'] == 6000

    loss = await player_client.post('/api/game-result', json={'gameId': 2, 'amount': 200, 'isWin': False})
    assert loss.status_code == 200
    assert loss.json() == {'success': True, 'newBalance': 5800}

    withdrawal = await player_client.post('/api/transactions', json={'amount': 10_000, 'type': 'withdrawal'})
    assert withdrawal.status_code == 400
    assert withdrawal.json()['message'] == 'Insufficient balance'
    assert (await player_client.get('/api/user')).json()['balance'] == 5800

    history = (await player_client.get('/api/transactions')).json()
    assert [(t['type'], t['amount']) for t in history] == [('deposit', 1000), ('loss', 200)]


async def test_game_result_win(player_client, games):
    response = await player_client.post('/api/game-result', json={'gameId': 3, 'amount': 150, 'isWin': True})
    assert response.status_code == 200
    assert response.json()['newBalance'] == 5150

    history = (await player_client.get('/api/transactions')).json()
    assert history[-1]['type'] == 'win'
    assert history[-1]['userId'] == (await player_client.get('/api/user')).json()['id']


async def test_game_result_rejections(player_client, games):
    unknown = await player_client.post('/api/game-result', json={'gameId': 999, 'amount': 10, 'isWin': True})
    assert unknown.status_code == 404
    assert unknown.json()['message'] == 'Game not found'

    zero = await player_client.post('/api/game-result', json={'gameId': 1, 'amount': 0, 'isWin': True})
    assert zero.status_code == 400
    assert zero.json()['message'] == 'Invalid amount'

    broke = await player_client.post('/api/game-result', json={'gameId': 1, 'amount': 5001, 'isWin': False})
    assert broke.status_code == 400
    assert broke.json()['message'] == 'Insufficient balance'

    malformed = await player_client.post('/api/game-result', json={'gameId': 1, 'amount': 'lots'})
    assert malformed.status_code == 400
    assert malformed.json()['message'] == 'Invalid game result data'
    assert malformed.json()['errors']

    assert (await player_client.get('/api/transactions')).json() == []


async def test_crash_bet_and_cash_out_through_transactions(player_client, games):
    stake = await player_client.post('/api/transactions', json={
        'amount': 100, 'type': 'loss', 'method': 'game', 'notes': 'Crash Game Bet',
    })
    assert stake.status_code == 201
    payout = await player_client.post('/api/transactions', json={
        'amount': 250, 'type': 'win', 'method': 'game', 'notes': 'Crash Game Win (2.50x)',
    })
    assert payout.status_code == 201
    assert (await player_client.get('/api/user')).json()['balance'] == 5150


async def test_pending_deposit_does_not_credit(player_client):
    response = await player_client.post('/api/transactions', json={
        'amount': 2000,
        'type': 'deposit',
        'method': 'Nagad',
        'status': 'pending',
        'notes': 'Transaction ID: NG7731902',
    })
    assert response.status_code == 201
    assert response.json()['status'] == 'pending'
    assert (await player_client.get('/api/user')).json()['balance'] == 5000


async def test_pending_deposit_out_of_range(player_client):
    response = await player_client.post('/api/transactions', json={
        'amount': 50, 'type': 'deposit', 'method': 'Nagad', 'status': 'pending', 'notes': 'NG7731902',
    })
    assert response.status_code == 400
    assert 'between' in response.json()['message']


async def test_unknown_transaction_type_is_schema_error(player_client):
    response = await player_client.post('/api/transactions', json={'amount': 10, 'type': 'bonus'})
    assert response.status_code == 400
    assert response.json()['message'] == 'Invalid transaction data'


async def test_transactions_require_session(client, setup_db):
    assert (await client.get('/api/transactions')).status_code == 401
    response = await client.post('/api/transactions', json={'amount': 10, 'type': 'deposit'})
    assert response.status_code == 401
    response = await client.post('/api/game-result', json={'gameId': 1, 'amount': 10, 'isWin': True})
    assert response.status_code == 401


async def test_players_only_see_their_own_transactions(player_client, admin_client):
    await player_client.post('/api/transactions', json={'amount': 300, 'type': 'deposit'})
    await admin_client.post('/api/transactions', json={'amount': 700, 'type': 'deposit'})

    mine = (await player_client.get('/api/transactions')).json()
    assert [t['amount'] for t in mine] == [300]


async def test_payment_methods_are_public(client, setup_db):
    response = await client.get('/api/payment-methods')
    assert response.status_code == 200
    names = [m['name'] for m in response.json()]
    assert names == ['Nagad', 'bKash', 'SSLCommerz', 'Bank Transfer']
    bkash = response.json()[1]
    assert bkash['accountType'] == 'Merchant'
    assert len(bkash['instructions']) > 0


async def test_oversized_amount_is_rejected_not_crashed(player_client, games):
    deposit = await player_client.post('/api/transactions', json={'amount': 10**19, 'type': 'deposit'})
    assert deposit.status_code == 400
    assert deposit.json()['message'].startswith('Amount must not exceed')

    win = await player_client.post('/api/game-result', json={'gameId': 1, 'amount': 10**19, 'isWin': True})
    assert win.status_code == 400

    assert (await player_client.get('/api/user')).json()['balance'] == 5000
    assert (await player_client.get('/api/transactions')).json() == []
